"""
Authentication endpoints
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from presence.core.constants import AUDIT_LOGIN_SUCCESS
from presence.core.deps import get_db
from presence.core.security import verify_password, create_access_token
from presence.schemas.auth import LoginRequest, TokenResponse
from presence.services.audit_service import log_audit
from presence.services.user_service import get_user_by_email

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    db: Session = Depends(get_db)
):
    """
    Authenticate user and return JWT token

    Validates email and password, rejects inactive accounts.
    """
    user = get_user_by_email(db, login_data.email)

    if not user or user.password_hash is None or not verify_password(login_data.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password"
        )

    if not user.active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive"
        )

    # JWT 'sub' claim must be a string
    access_token = create_access_token(data={
        "sub": str(user.id),
        "email": user.email,
        "role": user.role,
    })

    log_audit(
        db=db,
        actor_id=user.id,
        action=AUDIT_LOGIN_SUCCESS,
        entity_type="auth",
        meta={"email": user.email, "role": user.role},
    )

    return TokenResponse(access_token=access_token, token_type="bearer")
