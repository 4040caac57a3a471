import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String, Text

from coupon_site.db.base_class import Base


def generate_id() -> str:
    return uuid.uuid4().hex


class Coupon(Base):
    __tablename__ = "coupons"

    id = Column(String(32), primary_key=True, default=generate_id)
    offer = Column(Text, nullable=True)
    code = Column(String(255), nullable=True)
    link = Column(Text, nullable=True)

    # Interaction counters; only ever incremented
    used = Column(Integer, default=0, nullable=False)
    today = Column(Integer, default=0, nullable=False)  # never reset here
    thumbs_up = Column(Integer, default=0, nullable=False)
    thumbs_down = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
