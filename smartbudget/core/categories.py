"""
Default categories and the keyword map used to auto-categorize transactions.

Both live in a frozen ``CategoryConfig`` that callers pass explicitly to
``categorize_description`` instead of reading module-level state.
"""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

GLOBAL_USER_ID = "GLOBAL"


@dataclass(frozen=True)
class DefaultCategory:
    category_id: str
    name: str
    icon: str
    color: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category_id": self.category_id,
            "name": self.name,
            "icon": self.icon,
            "color": self.color,
            "user_id": GLOBAL_USER_ID,
            "is_default": True,
        }


@dataclass(frozen=True)
class CategoryConfig:
    categories: Tuple[DefaultCategory, ...]
    # keyword -> category_id, matched in insertion order
    keywords: Mapping[str, str]

    def get(self, category_id: str) -> Optional[DefaultCategory]:
        for category in self.categories:
            if category.category_id == category_id:
                return category
        return None

    def is_default(self, category_id: str) -> bool:
        return self.get(category_id) is not None

    def find_by_name(self, name: str) -> Optional[DefaultCategory]:
        """Case-insensitive partial match in either direction."""
        lower_name = name.lower()
        for category in self.categories:
            category_name = category.name.lower()
            if lower_name in category_name or category_name in lower_name:
                return category
        return None


def categorize_description(description: Optional[str], config: CategoryConfig) -> Optional[str]:
    """Return the category_id of the first keyword found in the description."""
    if not description:
        return None

    lower_desc = description.lower()
    for keyword, category_id in config.keywords.items():
        if keyword in lower_desc:
            return category_id
    return None


_DEFAULTS = (
    DefaultCategory("default-01", "Housing", "home", "#4A6FA5"),
    DefaultCategory("default-02", "Food & Dining", "utensils", "#FFA500"),
    DefaultCategory("default-03", "Transportation", "car", "#38B2AC"),
    DefaultCategory("default-04", "Entertainment", "film", "#805AD5"),
    DefaultCategory("default-05", "Shopping", "shopping-cart", "#F687B3"),
    DefaultCategory("default-06", "Utilities", "bolt", "#F56565"),
    DefaultCategory("default-07", "Healthcare", "heartbeat", "#48BB78"),
    DefaultCategory("default-08", "Education", "graduation-cap", "#ED8936"),
    DefaultCategory("default-09", "Personal Care", "cut", "#9F7AEA"),
    DefaultCategory("default-10", "Travel", "plane", "#667EEA"),
    DefaultCategory("default-11", "Gifts & Donations", "gift", "#FC8181"),
    DefaultCategory("default-12", "Investments", "chart-line", "#4FD1C5"),
    DefaultCategory("default-13", "Income", "dollar-sign", "#68D391"),
    DefaultCategory("default-14", "Taxes", "file-invoice-dollar", "#CBD5E0"),
    DefaultCategory("default-15", "Miscellaneous", "ellipsis-h", "#A0AEC0"),
)

# "gas bill" must be tried before "gas"
_KEYWORDS = {
    "rent": "default-01",
    "mortgage": "default-01",
    "apartment": "default-01",
    "housing": "default-01",
    "restaurant": "default-02",
    "cafe": "default-02",
    "grocery": "default-02",
    "takeout": "default-02",
    "food": "default-02",
    "dining": "default-02",
    "gas bill": "default-06",
    "gas": "default-03",
    "fuel": "default-03",
    "car": "default-03",
    "auto": "default-03",
    "bus": "default-03",
    "train": "default-03",
    "uber": "default-03",
    "lyft": "default-03",
    "taxi": "default-03",
    "movie": "default-04",
    "theatre": "default-04",
    "theater": "default-04",
    "concert": "default-04",
    "streaming": "default-04",
    "netflix": "default-04",
    "spotify": "default-04",
    "amazon": "default-05",
    "walmart": "default-05",
    "target": "default-05",
    "store": "default-05",
    "shopping": "default-05",
    "purchase": "default-05",
    "electric": "default-06",
    "water": "default-06",
    "utility": "default-06",
    "internet": "default-06",
    "phone": "default-06",
    "mobile": "default-06",
    "doctor": "default-07",
    "medical": "default-07",
    "clinic": "default-07",
    "hospital": "default-07",
    "pharmacy": "default-07",
    "prescription": "default-07",
    "school": "default-08",
    "college": "default-08",
    "university": "default-08",
    "tuition": "default-08",
    "course": "default-08",
    "book": "default-08",
    "salary": "default-13",
    "paycheck": "default-13",
    "income": "default-13",
    "wage": "default-13",
    "deposit": "default-13",
    "refund": "default-13",
    "other": "default-15",
    "misc": "default-15",
    "unknown": "default-15",
}

DEFAULT_CATEGORY_CONFIG = CategoryConfig(
    categories=_DEFAULTS,
    keywords=MappingProxyType(_KEYWORDS),
)
