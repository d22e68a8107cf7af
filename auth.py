import hmac
import logging
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from config import settings

logger = logging.getLogger(__name__)

bearer = HTTPBearer(auto_error=False)


def require_admin(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer)) -> None:
    """Single admin gate. Open when ADMIN_TOKEN is not configured."""
    expected = settings.admin_token
    if not expected:
        return
    if credentials is None or not hmac.compare_digest(credentials.credentials, expected):
        raise HTTPException(status_code=401, detail="Not authorized")


def warn_if_open() -> None:
    if not settings.admin_token:
        logger.warning("ADMIN_TOKEN is not set; admin routes are open to everyone")
