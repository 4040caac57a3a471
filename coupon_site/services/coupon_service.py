from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import structlog

from coupon_site.core.exceptions import CouponNotFound, StorageError
from coupon_site.models.coupon import Coupon
from coupon_site.schemas.coupon import CouponCreate, CouponUpdate

logger = structlog.get_logger()


class CouponService:

    @staticmethod
    def list_coupons(db: Session) -> List[Coupon]:
        """Return every coupon, unpaginated."""
        try:
            return db.query(Coupon).all()
        except SQLAlchemyError:
            logger.exception("coupon_list_failed")
            raise StorageError("Error fetching coupons")

    @staticmethod
    def create_coupon(db: Session, coupon_data: CouponCreate) -> Coupon:
        """Persist a new coupon with all counters at zero."""
        coupon = Coupon(
            offer=coupon_data.offer,
            code=coupon_data.code,
            link=coupon_data.link,
            used=0,
            today=0,
            thumbs_up=0,
            thumbs_down=0,
        )
        try:
            db.add(coupon)
            db.commit()
            db.refresh(coupon)
        except SQLAlchemyError:
            db.rollback()
            logger.exception("coupon_create_failed")
            raise StorageError("Error adding coupon")

        logger.info("coupon_created", coupon_id=coupon.id)
        return coupon

    @staticmethod
    def update_coupon(db: Session, coupon_id: str, coupon_data: CouponUpdate) -> Optional[Coupon]:
        """Replace offer/code/link. Returns None when the coupon does not exist."""
        try:
            coupon = db.query(Coupon).filter(Coupon.id == coupon_id).first()
            if coupon is None:
                return None

            coupon.offer = coupon_data.offer
            coupon.code = coupon_data.code
            coupon.link = coupon_data.link
            db.commit()
            db.refresh(coupon)
            return coupon
        except SQLAlchemyError:
            db.rollback()
            logger.exception("coupon_update_failed", coupon_id=coupon_id)
            raise StorageError("Error updating coupon")

    @staticmethod
    def delete_coupon(db: Session, coupon_id: str) -> None:
        """Delete a coupon; deleting a missing id is not an error."""
        try:
            db.query(Coupon).filter(Coupon.id == coupon_id).delete(synchronize_session=False)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception("coupon_delete_failed", coupon_id=coupon_id)
            raise StorageError("Error deleting coupon")

    @staticmethod
    def get_interactions(db: Session, coupon_id: str) -> dict:
        try:
            coupon = db.query(Coupon).filter(Coupon.id == coupon_id).first()
        except SQLAlchemyError:
            logger.exception("coupon_interactions_failed", coupon_id=coupon_id)
            raise StorageError("Error fetching coupon interactions")

        if coupon is None:
            raise CouponNotFound()

        return {
            "thumbsUp": coupon.thumbs_up,
            "thumbsDown": coupon.thumbs_down,
            "clicks": coupon.used,
        }

    @staticmethod
    def _increment(db: Session, coupon_id: str, columns: list, error_message: str) -> None:
        # Single UPDATE ... SET col = col + 1; concurrent callers never lose increments
        values = {column: column + 1 for column in columns}
        try:
            db.query(Coupon).filter(Coupon.id == coupon_id).update(values, synchronize_session=False)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception("coupon_increment_failed", coupon_id=coupon_id)
            raise StorageError(error_message)

    @staticmethod
    def increment_clicks(db: Session, coupon_id: str) -> None:
        CouponService._increment(
            db, coupon_id, [Coupon.used, Coupon.today], "Error updating coupon click count"
        )

    @staticmethod
    def increment_thumbs_up(db: Session, coupon_id: str) -> None:
        CouponService._increment(db, coupon_id, [Coupon.thumbs_up], "Error recording thumbs up")

    @staticmethod
    def increment_thumbs_down(db: Session, coupon_id: str) -> None:
        CouponService._increment(db, coupon_id, [Coupon.thumbs_down], "Error recording thumbs down")
