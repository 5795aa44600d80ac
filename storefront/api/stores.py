"""Store API: list and create the current user's stores."""
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from storefront.api.dependencies import require_authenticated
from storefront.models.base import get_db
from storefront.models.store import Store
from storefront.models.user import User
from storefront.utils.logger import log

router = APIRouter(prefix="/stores", tags=["stores"])


class CreateStoreRequest(BaseModel):
    name: str


def _store_out(s: Store) -> dict:
    return {
        "id": s.id,
        "name": s.name,
        "userId": s.user_id,
        "createdAt": s.created_at,
        "updatedAt": s.updated_at,
    }


@router.get("")
async def list_stores(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_authenticated),
):
    """Stores owned by the current user."""
    stores = db.query(Store).filter(Store.user_id == current_user.id).order_by(Store.created_at).all()
    return [_store_out(s) for s in stores]


@router.post("", status_code=201)
async def create_store(
    body: CreateStoreRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_authenticated),
):
    """Create a store owned by the current user."""
    name = body.name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="Name is required")
    store = Store(name=name, user_id=current_user.id)
    db.add(store)
    db.commit()
    db.refresh(store)
    log.info(f"Created store {store.id} for user {current_user.id}")
    return _store_out(store)
