from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from coupon_site.api.deps import (
    coupon_create_payload,
    coupon_update_payload,
    guard_coupon_mutation,
)
from coupon_site.db.session import get_db
from coupon_site.schemas.coupon import (
    CouponCreate,
    CouponResponse,
    CouponUpdate,
    InteractionsResponse,
    MessageResponse,
)
from coupon_site.services.coupon_service import CouponService

router = APIRouter()


@router.get("", response_model=List[CouponResponse], response_model_by_alias=True)
def list_coupons(db: Session = Depends(get_db)):
    """List every coupon."""
    return CouponService.list_coupons(db)


@router.post(
    "",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(guard_coupon_mutation)],
)
def create_coupon(
    coupon_data: CouponCreate = Depends(coupon_create_payload),
    db: Session = Depends(get_db),
):
    CouponService.create_coupon(db, coupon_data)
    return {"message": "Coupon added successfully"}


@router.put(
    "/{coupon_id}",
    response_model=Optional[CouponResponse],
    response_model_by_alias=True,
    dependencies=[Depends(guard_coupon_mutation)],
)
def update_coupon(
    coupon_id: str,
    coupon_data: CouponUpdate = Depends(coupon_update_payload),
    db: Session = Depends(get_db),
):
    """Update offer/code/link. A missing coupon yields 200 with a null body."""
    return CouponService.update_coupon(db, coupon_id, coupon_data)


@router.delete(
    "/{coupon_id}",
    response_model=MessageResponse,
    dependencies=[Depends(guard_coupon_mutation)],
)
def delete_coupon(coupon_id: str, db: Session = Depends(get_db)):
    CouponService.delete_coupon(db, coupon_id)
    return {"message": "Coupon deleted successfully"}


@router.get("/{coupon_id}/interactions", response_model=InteractionsResponse)
def get_coupon_interactions(coupon_id: str, db: Session = Depends(get_db)):
    return CouponService.get_interactions(db, coupon_id)


@router.post("/{coupon_id}/click", response_model=MessageResponse)
def record_click(coupon_id: str, db: Session = Depends(get_db)):
    CouponService.increment_clicks(db, coupon_id)
    return {"message": "Coupon click count updated"}


@router.post("/{coupon_id}/thumbs-up", response_model=MessageResponse)
def record_thumbs_up(coupon_id: str, db: Session = Depends(get_db)):
    CouponService.increment_thumbs_up(db, coupon_id)
    return {"message": "Thumbs up recorded"}


@router.post("/{coupon_id}/thumbs-down", response_model=MessageResponse)
def record_thumbs_down(coupon_id: str, db: Session = Depends(get_db)):
    CouponService.increment_thumbs_down(db, coupon_id)
    return {"message": "Thumbs down recorded"}
