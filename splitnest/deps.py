import logging
import os
import secrets

from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.orm import Session

from splitnest.database import get_db
from splitnest.store import SqlAlchemyLedgerStore

logger = logging.getLogger("splitnest")

ADMIN_TOKEN_HEADER = "X-Admin-Token"


def get_store(db: Session = Depends(get_db)) -> SqlAlchemyLedgerStore:
    return SqlAlchemyLedgerStore(db)


def require_admin(
    request: Request,
    x_admin_token: str | None = Header(None, alias=ADMIN_TOKEN_HEADER),
) -> None:
    """Check the caller-held admin session token against ADMIN_TOKEN."""
    expected = os.getenv("ADMIN_TOKEN")
    if not expected:
        logger.warning("ADMIN_TOKEN is not set; admin routes are open")
        request.state.is_admin = True
        return

    if x_admin_token and secrets.compare_digest(x_admin_token, expected):
        request.state.is_admin = True
        return

    logger.warning("Admin verification failed", extra={"extra_data": {"path": request.url.path}})
    raise HTTPException(status_code=403, detail="Admin token required")
