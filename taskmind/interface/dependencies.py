"""Shared FastAPI dependencies."""

import logging
import re

from fastapi import Header, HTTPException, status

from taskmind.core.config import constants


logger = logging.getLogger(__name__)

_OWNER_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


async def get_owner_id(x_user_id: str | None = Header(default=None, alias=constants.OWNER_ID_HEADER)) -> str:
    """Resolve the owner of the request from the header set by the auth proxy."""
    if not x_user_id:
        logger.warning("request_missing_owner_id")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not authenticated")

    if not _OWNER_ID_PATTERN.match(x_user_id):
        logger.warning("request_invalid_owner_id")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid user ID")

    return x_user_id
