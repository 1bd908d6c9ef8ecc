from __future__ import annotations

from fastapi import Depends, Header, HTTPException, Request

from larp_ledger.app import LedgerApp
from larp_ledger.errors import NotFoundError
from larp_ledger.models.user import User


def get_ledger(request: Request) -> LedgerApp:
    return request.app.state.ledger


def current_user(
    x_user_id: str | None = Header(None),
    ledger: LedgerApp = Depends(get_ledger),
) -> User:
    """The caller named by the X-User-Id header; authentication happens upstream."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="X-User-Id header required")
    try:
        return ledger.chapters.get_user(x_user_id)
    except NotFoundError:
        raise HTTPException(status_code=401, detail="Unknown user") from None


def require_admin(user: User = Depends(current_user)) -> User:
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
