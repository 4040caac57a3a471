from datetime import datetime

from sqlalchemy import Column, DateTime, String

from coupon_site.db.base_class import Base
from coupon_site.models.coupon import generate_id


class Admin(Base):
    __tablename__ = "admins"

    id = Column(String(32), primary_key=True, default=generate_id)
    username = Column(String(150), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
