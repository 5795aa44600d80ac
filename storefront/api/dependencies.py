"""Shared route dependencies: current user, store ownership, order repository."""
from fastapi import Depends, HTTPException, Path, Request
from sqlalchemy.orm import Session

from storefront.models.base import get_db
from storefront.models.store import Store
from storefront.models.user import User
from storefront.services.order_repository import SqlOrderRepository


def require_authenticated(request: Request) -> User:
    """Raise 401 if no authenticated user on request."""
    user = getattr(request.state, "user", None)
    if not user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


def get_owned_store(
    store_id: str = Path(..., min_length=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_authenticated),
) -> Store:
    """The store named in the path, if the current user owns it; 403 otherwise."""
    store = (
        db.query(Store)
        .filter(Store.id == store_id, Store.user_id == current_user.id)
        .first()
    )
    if not store:
        raise HTTPException(status_code=403, detail="Unauthorized")
    return store


def get_order_repository(db: Session = Depends(get_db)) -> SqlOrderRepository:
    return SqlOrderRepository(db)
