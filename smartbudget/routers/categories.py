from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException, status

from smartbudget.core.categories import DEFAULT_CATEGORY_CONFIG
from smartbudget.db import dynamo
from smartbudget.models.category import CategoryCreate, CategoryInDB, CategoryUpdate
from smartbudget.routers.auth import get_current_user_id, require_owner

router = APIRouter()


def _forbid_default(category_id: str) -> None:
    if DEFAULT_CATEGORY_CONFIG.is_default(category_id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Default categories cannot be modified")


@router.get("/")
def list_categories(user_id: str = Depends(get_current_user_id)) -> List[Dict]:
    """Global default categories followed by the user's own."""
    return dynamo.get_categories_by_user_id(user_id)


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_category(category: CategoryCreate, user_id: str = Depends(get_current_user_id)) -> Dict:
    category_db = CategoryInDB(user_id=user_id, **category.model_dump())
    item = category_db.model_dump(mode="json")
    if not dynamo.put_category(item):
        raise HTTPException(status_code=500, detail="Failed to save category")
    return item


@router.get("/{category_id}")
def get_category(category_id: str, user_id: str = Depends(get_current_user_id)) -> Dict:
    default = DEFAULT_CATEGORY_CONFIG.get(category_id)
    if default:
        return default.to_dict()
    return require_owner(dynamo.get_category(category_id), user_id, "Category")


@router.patch("/{category_id}")
def update_category(
    category_id: str,
    category_update: CategoryUpdate,
    user_id: str = Depends(get_current_user_id),
) -> Dict:
    _forbid_default(category_id)
    require_owner(dynamo.get_category(category_id), user_id, "Category")

    updates = category_update.model_dump(exclude_unset=True)
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")

    updated = dynamo.update_category(category_id, updates)
    if not updated:
        raise HTTPException(status_code=404, detail="Category not found")
    return updated


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(category_id: str, user_id: str = Depends(get_current_user_id)):
    _forbid_default(category_id)
    require_owner(dynamo.get_category(category_id), user_id, "Category")

    if not dynamo.delete_category(category_id):
        raise HTTPException(status_code=500, detail="Failed to delete category")
    return None
