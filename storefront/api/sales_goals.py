"""Sales Goals API: upsert, delete and progress-with-pacing for a store's goals."""
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlalchemy.orm import Session

from storefront.api.dependencies import get_order_repository, get_owned_store
from storefront.models.base import get_db
from storefront.models.store import Store
from storefront.services import sales_goal_service
from storefront.services.goal_pacing import goal_to_dict
from storefront.services.order_repository import OrderRepository
from storefront.utils.logger import log

router = APIRouter(prefix="/stores/{store_id}/sales-goals", tags=["sales-goals"])


class SalesGoalRequest(BaseModel):
    """Body for create / update. Type, enum and range checks happen in the service so they map to 400."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    metric_type: Optional[str] = None
    time_period: Optional[str] = None
    target_value: Any = None
    goal_id: Optional[str] = None


@router.get("")
async def list_goals(
    store_id: str,
    store: Store = Depends(get_owned_store),
    repo: OrderRepository = Depends(get_order_repository),
):
    """All goals with current progress over their window and a pacing status."""
    try:
        return sales_goal_service.get_goals_with_progress(repo, store.id)
    except Exception as e:
        log.error(f"Goal progress failed for store {store_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal error")


@router.post("")
async def upsert_goal(
    store_id: str,
    body: SalesGoalRequest,
    store: Store = Depends(get_owned_store),
    db: Session = Depends(get_db),
):
    """Create a goal, or update `goalId` when given."""
    try:
        goal = sales_goal_service.upsert_goal(
            db,
            store.id,
            metric_type=body.metric_type,
            time_period=body.time_period,
            target_value=body.target_value,
            goal_id=body.goal_id,
        )
        return goal_to_dict(goal)
    except sales_goal_service.GoalNotFound:
        raise HTTPException(status_code=404, detail="Goal not found")
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except Exception as e:
        log.error(f"Saving goal failed for store {store_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal error")


@router.delete("/{goal_id}")
async def delete_goal(
    store_id: str,
    goal_id: str,
    store: Store = Depends(get_owned_store),
    db: Session = Depends(get_db),
):
    """Delete a goal and return it."""
    try:
        return sales_goal_service.delete_goal(db, store.id, goal_id)
    except sales_goal_service.GoalNotFound:
        raise HTTPException(status_code=404, detail="Goal not found")
    except Exception as e:
        log.error(f"Deleting goal {goal_id} failed for store {store_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal error")
