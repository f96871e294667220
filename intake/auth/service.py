from typing import Any, Dict

import jwt
from fastapi import HTTPException

from intake.logging_config import get_logger
from intake.settings import get_settings

from .models import CallerIdentity

logger = get_logger(name=__name__)

# Claim carrying the caller attributes
IDENTITY_CLAIM = "data"


def _decode(token: str) -> Dict[str, Any]:
    settings = get_settings()
    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=settings.jwt_algorithms_list,
        )
    except jwt.ExpiredSignatureError as exc:
        logger.info("Rejected expired caller token")
        raise HTTPException(status_code=401, detail="Token has expired") from exc
    except jwt.InvalidTokenError as exc:
        logger.warning("Rejected invalid caller token: {}", exc)
        raise HTTPException(status_code=401, detail="Invalid token") from exc


def decode_caller_token(token: str) -> CallerIdentity:
    """Verify a bearer token and map its ``data`` claim to a CallerIdentity.

    Identity values are stringified; missing attributes become empty strings.
    """
    claims = _decode(token)
    data = claims.get(IDENTITY_CLAIM)
    if not isinstance(data, dict):
        logger.warning("Caller token has no '{}' claim", IDENTITY_CLAIM)
        raise HTTPException(status_code=401, detail="Token carries no caller identity")

    return CallerIdentity(
        providerId=_as_text(data.get("providerId")),
        team=_as_text(data.get("team")),
        teamId=_as_text(data.get("teamId")),
        locationId=_as_text(data.get("locationId")),
    )


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)
