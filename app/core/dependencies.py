from typing import Optional

from fastapi import Request, Depends
from pydantic import ValidationError

from .logging_config import get_logger
from .security import decode_access_token
from app import schemas

logger = get_logger("customer_api.auth")


async def get_token_from_cookie_or_header(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization")
    if auth_header:
        return auth_header.replace("Bearer ", "").strip()

    token = request.cookies.get("token")
    if token:
        return token.replace("Bearer ", "").strip()

    return None


async def get_current_customer(
        token: Optional[str] = Depends(get_token_from_cookie_or_header)
) -> Optional[schemas.TokenData]:
    """
    Decoded signature of the caller, or None when the request carries no usable token.
    Handlers decide how to answer an anonymous caller.
    """
    if not token:
        return None

    payload = decode_access_token(token)
    if payload is None:
        logger.info("Rejected invalid or expired signature")
        return None

    try:
        return schemas.TokenData.model_validate(payload)
    except ValidationError:
        logger.info("Rejected signature with malformed claims")
        return None
