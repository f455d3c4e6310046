"""
Authentication routes for WeChat login and logout.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from diaryledger.db.session import get_db
from diaryledger.schemas.user import WechatLogin, LoginResponse
from diaryledger.core.security import create_user_token, decode_access_token
from diaryledger.services.identity_service import (
    WECHAT_PROVIDER,
    fetch_wechat_session,
    resolve_or_create_user,
)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/wechat-login", response_model=LoginResponse)
async def wechat_login(login_data: WechatLogin, db: Session = Depends(get_db)):
    """Exchange a mini-program login code for an access token."""
    session = await fetch_wechat_session(login_data.code)
    user = resolve_or_create_user(db, WECHAT_PROVIDER, session["openid"])

    return {
        "access_token": create_user_token(user.id),
        "token_type": "bearer",
        "user": user
    }


@router.post("/logout")
async def logout(token: str):
    """Logout (client-side token removal)."""
    # Tokens are stateless; the client discards its copy
    if not decode_access_token(token):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token"
        )
    return {"message": "Successfully logged out"}
