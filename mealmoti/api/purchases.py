"""Purchase API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from mealmoti.api.dependencies import get_current_user, get_purchase_service
from mealmoti.models.user import User
from mealmoti.schemas.purchase import PurchaseCreate, PurchaseResponse, PurchaseUpdate
from mealmoti.services.purchases import PurchaseService

router = APIRouter(prefix="/api/v1", tags=["purchases"])


@router.get("/lists/{list_id}/purchases", response_model=list[PurchaseResponse])
def get_purchases(
    list_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[PurchaseService, Depends(get_purchase_service)],
):
    """Get the purchases recorded for a list."""
    return service.list_purchases(current_user, list_id)


@router.post(
    "/lists/{list_id}/purchases",
    response_model=PurchaseResponse,
    status_code=status.HTTP_201_CREATED,
)
def record_purchase(
    list_id: int,
    purchase_data: PurchaseCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[PurchaseService, Depends(get_purchase_service)],
):
    """Record the list's checked items as a purchase."""
    return service.record_purchase(current_user, list_id, purchase_data)


@router.get("/purchases/{purchase_id}", response_model=PurchaseResponse)
def get_purchase(
    purchase_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[PurchaseService, Depends(get_purchase_service)],
):
    """Get a single purchase with its lines."""
    return service.get_purchase(current_user, purchase_id)


@router.put("/purchases/{purchase_id}", response_model=PurchaseResponse)
def update_purchase(
    purchase_id: int,
    purchase_data: PurchaseUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[PurchaseService, Depends(get_purchase_service)],
):
    """Correct quantities or prices of a purchase."""
    return service.update_purchase(current_user, purchase_id, purchase_data)
