from __future__ import annotations

import logging
from typing import Optional

from fastapi import Header, HTTPException

from api import context
from core.errors import (
    AuthenticationError,
    DuplicateSubject,
    InvalidInput,
    NotPunchedIn,
    StoreUnavailable,
    SubjectNotFound,
    TimeclockError,
)
from core.system import TimeclockSystem

logger = logging.getLogger(__name__)

STATUS_CODES = (
    (InvalidInput, 400),
    (NotPunchedIn, 400),
    (AuthenticationError, 401),
    (SubjectNotFound, 404),
    (DuplicateSubject, 409),
    (StoreUnavailable, 503),
)


def get_system() -> TimeclockSystem:
    return context.system


def get_subject_id(x_subject_id: Optional[str] = Header(None, alias="X-Subject-Id")) -> str:
    """The caller's session layer resolves the subject and forwards it here."""
    subject_id = (x_subject_id or "").strip()
    if not subject_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return subject_id


def to_http_error(exc: TimeclockError) -> HTTPException:
    for error_type, status_code in STATUS_CODES:
        if isinstance(exc, error_type):
            if status_code >= 500:
                logger.error("Store failure: %s", exc)
            return HTTPException(status_code=status_code, detail=str(exc))
    logger.exception("Unhandled timeclock error")
    return HTTPException(status_code=500, detail="Internal server error")
