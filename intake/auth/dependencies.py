from typing import Optional

from fastapi import Depends, Header, HTTPException

from .models import CallerIdentity
from .service import decode_caller_token


async def get_optional_token(authorization: Optional[str] = Header(default=None)) -> Optional[str]:
    if not authorization or not authorization.startswith("Bearer "):
        return None
    return authorization.split(" ", 1)[1]


async def get_token_from_header(authorization: Optional[str] = Header(default=None)) -> str:
    if not authorization:
        raise HTTPException(status_code=401, detail="Missing authorization header")
    if not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid header format")
    return authorization.split(" ", 1)[1]


async def require_caller(token: str = Depends(get_token_from_header)) -> CallerIdentity:
    """Resolve the caller identity or reject the request with 401."""
    return decode_caller_token(token)


async def optional_caller(token: Optional[str] = Depends(get_optional_token)) -> Optional[CallerIdentity]:
    """Caller identity when a valid token is present, otherwise None."""
    if token is None:
        return None
    try:
        return decode_caller_token(token)
    except HTTPException:
        return None
