import logging
from typing import Dict, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, status

from smartbudget.core.security import create_access_token, decode_access_token, get_password_hash, verify_password
from smartbudget.db import dynamo
from smartbudget.models.user import UserCreate, UserInDB, UserLogin, UserPublic

router = APIRouter()
logger = logging.getLogger(__name__)


def get_current_user_id(authorization: Optional[str] = Header(None)) -> str:
    """Extract user_id from JWT token"""
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token required")

    token = authorization.replace("Bearer ", "", 1)
    payload = decode_access_token(token)
    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return user_id


def require_owner(item: Optional[Dict], user_id: str, name: str) -> Dict:
    """404 if the item is missing, 403 if another user owns it."""
    if not item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{name} not found")
    if item.get("user_id") != user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return item


@router.post("/register", response_model=UserPublic, status_code=status.HTTP_201_CREATED)
def register(user: UserCreate):
    existing = dynamo.get_user_by_email(user.email)
    if existing:
        raise HTTPException(status_code=400, detail="User already exists")

    user_db = UserInDB(
        email=user.email,
        full_name=user.full_name,
        password_hash=get_password_hash(user.password),
    )

    success = dynamo.put_user(user_db.model_dump())
    if not success:
        raise HTTPException(status_code=500, detail="Error saving user")

    logger.info(f"Registered user {user_db.user_id}")
    return UserPublic(**user_db.model_dump())


@router.get("/me", response_model=UserPublic)
def get_current_user(user_id: str = Depends(get_current_user_id)):
    """Get current user profile"""
    user = dynamo.get_user_by_id(user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    return UserPublic(
        user_id=user["user_id"],
        email=user["email"],
        full_name=user.get("full_name"),
        created_at=user.get("created_at", ""),
    )


@router.post("/login")
def login(login_data: UserLogin):
    logger.info(f"Login attempt for email: {login_data.email}")
    user = dynamo.get_user_by_email(login_data.email)

    if not user or not verify_password(login_data.password, user["password_hash"]):
        logger.warning(f"Invalid credentials for: {login_data.email}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    access_token = create_access_token(data={"sub": user["user_id"]})
    logger.info(f"Login successful for user: {login_data.email}")

    user_public = UserPublic(
        user_id=user["user_id"],
        email=user["email"],
        full_name=user.get("full_name"),
        created_at=user.get("created_at", ""),
    )
    return {
        "access_token": access_token,
        "token_type": "bearer",
        "user": user_public.model_dump(),
    }
