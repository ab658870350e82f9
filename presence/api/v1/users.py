"""
User management endpoints (admin) and self-service profile
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from presence.core.deps import get_db, get_current_user, require_admin
from presence.models.user import Role, User
from presence.schemas.user import UserCreate, UserUpdate, ProfileUpdate, UserOut
from presence.services import user_service

router = APIRouter()


@router.get("/me", response_model=UserOut)
async def get_me_endpoint(current_user: User = Depends(get_current_user)):
    """Current authenticated user's profile"""
    return current_user


@router.patch("/me", response_model=UserOut)
async def update_me_endpoint(
    body: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Update own name, department, photo or password"""
    return user_service.update_profile(db, current_user, body)


@router.get("", response_model=List[UserOut])
async def list_users_endpoint(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    role: Optional[Role] = Query(None),
    active_only: Optional[bool] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """List users, newest first (admin)"""
    return user_service.list_users(
        db,
        skip=skip,
        limit=limit,
        role=role.value if role else None,
        active_only=active_only,
    )


@router.post("", response_model=UserOut, status_code=201)
async def create_user_endpoint(
    body: UserCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Create a user account (admin)"""
    return user_service.create_user(db, body, current_user.id)


@router.get("/{user_id}", response_model=UserOut)
async def get_user_endpoint(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    return user_service.get_user(db, user_id)


@router.patch("/{user_id}", response_model=UserOut)
async def update_user_endpoint(
    user_id: int,
    body: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Update a user account (admin). Empty password keeps the current one."""
    return user_service.update_user(db, user_id, body, current_user.id)


@router.delete("/{user_id}", status_code=204)
async def delete_user_endpoint(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Delete a user account and its attendance records (admin)"""
    user_service.delete_user(db, user_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
