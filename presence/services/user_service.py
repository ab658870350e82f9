"""
User service - business logic for user account management
"""
import logging
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from presence.core.constants import AUDIT_USER_CREATE, AUDIT_USER_DELETE, AUDIT_USER_UPDATE
from presence.core.security import hash_password
from presence.models.user import User
from presence.schemas.user import UserCreate, UserUpdate, ProfileUpdate
from presence.services.audit_service import log_audit

logger = logging.getLogger(__name__)


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(func.lower(User.email) == _normalize_email(email)).first()


def get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    return user


def list_users(
    db: Session,
    skip: int = 0,
    limit: int = 100,
    role: Optional[str] = None,
    active_only: Optional[bool] = None,
) -> List[User]:
    """List users, newest first."""
    query = db.query(User)
    if role:
        query = query.filter(User.role == role)
    if active_only:
        query = query.filter(User.active.is_(True))
    return query.order_by(User.created_at.desc(), User.id.desc()).offset(skip).limit(limit).all()


def create_user(db: Session, data: UserCreate, actor_id: Optional[int]) -> User:
    """
    Create a user account

    Raises:
        HTTPException: 400 if the email is already registered
    """
    email = _normalize_email(data.email)
    if get_user_by_email(db, email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"User with email '{email}' already exists"
        )

    user = User(
        email=email,
        full_name=data.full_name,
        role=data.role.value,
        department=data.department,
        photo_url=data.photo_url,
        password_hash=hash_password(data.password),
        active=data.active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    log_audit(
        db=db,
        actor_id=actor_id,
        action=AUDIT_USER_CREATE,
        entity_type="users",
        entity_id=user.id,
        meta={"email": user.email, "role": user.role, "department": user.department},
    )
    logger.info("Created user id=%s role=%s", user.id, user.role)
    return user


def _apply_password(user: User, password: Optional[str]) -> bool:
    # Empty password means "leave unchanged"
    if password:
        user.password_hash = hash_password(password)
        return True
    return False


def update_user(db: Session, user_id: int, data: UserUpdate, actor_id: int) -> User:
    """
    Update a user account (admin)

    Raises:
        HTTPException: 404 if user not found, 409 if the new email is taken
    """
    user = get_user(db, user_id)
    changes = data.model_dump(exclude_unset=True, exclude={"password"})

    if "email" in changes and changes["email"] is not None:
        email = _normalize_email(changes["email"])
        other = get_user_by_email(db, email)
        if other and other.id != user.id:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Email already in use by another user"
            )
        changes["email"] = email

    for key, value in changes.items():
        if value is None and key in ("email", "full_name", "role", "active"):
            continue
        setattr(user, key, value.value if hasattr(value, "value") else value)
    password_changed = _apply_password(user, data.password)

    db.commit()
    db.refresh(user)

    log_audit(
        db=db,
        actor_id=actor_id,
        action=AUDIT_USER_UPDATE,
        entity_type="users",
        entity_id=user.id,
        meta={"fields": sorted(changes.keys()), "password_changed": password_changed},
    )
    return user


def update_profile(db: Session, user: User, data: ProfileUpdate) -> User:
    """Self-service profile update for the current user."""
    changes = data.model_dump(exclude_unset=True, exclude={"password"})
    for key, value in changes.items():
        if value is None and key == "full_name":
            continue
        setattr(user, key, value)
    password_changed = _apply_password(user, data.password)

    db.commit()
    db.refresh(user)

    log_audit(
        db=db,
        actor_id=user.id,
        action=AUDIT_USER_UPDATE,
        entity_type="users",
        entity_id=user.id,
        meta={"fields": sorted(changes.keys()), "password_changed": password_changed, "self": True},
    )
    return user


def delete_user(db: Session, user_id: int, actor_id: int) -> None:
    """
    Delete a user account

    Raises:
        HTTPException: 404 if user not found, 400 when deleting yourself
    """
    user = get_user(db, user_id)
    if user.id == actor_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot delete your own account"
        )

    email = user.email
    db.delete(user)
    db.commit()

    log_audit(
        db=db,
        actor_id=actor_id,
        action=AUDIT_USER_DELETE,
        entity_type="users",
        entity_id=user_id,
        meta={"email": email},
    )
