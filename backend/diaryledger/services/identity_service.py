"""
Identity service: maps verified external identities to internal users.
"""
import logging
from typing import Optional
import httpx
from sqlalchemy.orm import Session
from diaryledger.core.config import settings
from diaryledger.models.user import User
from diaryledger.services.exceptions import InvalidArgumentError, ServiceError

logger = logging.getLogger(__name__)

WECHAT_PROVIDER = "wechat"


class IdentityProviderError(ServiceError):
    """The external identity provider could not verify the login."""
    kind = "identity_provider"
    default_status = 502


def resolve_or_create_user(db: Session, provider: str, subject: str, username: Optional[str] = None) -> User:
    """Return the user bound to (provider, subject), creating it on first login."""
    if not provider or not subject:
        raise InvalidArgumentError("External identity is incomplete")

    user = db.query(User).filter(
        User.provider == provider,
        User.provider_subject == subject
    ).first()
    if user:
        return user

    user = User(provider=provider, provider_subject=subject, username=username or "")
    db.add(user)
    db.flush()
    if not user.username:
        user.username = f"user-{user.id[:8]}"
    db.commit()
    db.refresh(user)

    logger.info("Created user %s for %s identity", user.id, provider)
    return user


async def fetch_wechat_session(code: str) -> dict:
    """Exchange a mini-program login code for the WeChat session (openid)."""
    if not settings.WECHAT_APP_ID or not settings.WECHAT_APP_SECRET:
        raise IdentityProviderError("WeChat login is not configured", status_code=500)

    try:
        async with httpx.AsyncClient(timeout=settings.WECHAT_TIMEOUT_SECONDS) as client:
            response = await client.get(
                settings.WECHAT_SESSION_URL,
                params={
                    "appid": settings.WECHAT_APP_ID,
                    "secret": settings.WECHAT_APP_SECRET,
                    "js_code": code,
                    "grant_type": "authorization_code"
                }
            )
    except httpx.HTTPError as e:
        logger.error(f"WeChat session request failed: {e}")
        raise IdentityProviderError("WeChat login request failed") from e

    if response.status_code != 200:
        logger.error(f"WeChat API error {response.status_code}: {response.text}")
        raise IdentityProviderError("WeChat login request failed")

    payload = response.json()
    if payload.get("errcode"):
        logger.warning(f"WeChat rejected login code: {payload.get('errmsg')}")
        raise IdentityProviderError(f"WeChat login rejected: {payload.get('errmsg')}", status_code=401)
    if not payload.get("openid"):
        raise IdentityProviderError("WeChat response carried no openid")
    return payload
