from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy.orm import Session

from coupon_site.core.config import Settings
from coupon_site.core.exceptions import CouponNotFound, InvalidCredentials, InvalidToken
from coupon_site.core.security import (
    create_access_token,
    hash_password,
    validate_token,
    verify_password,
)
from coupon_site.db.init_db import init_db
from coupon_site.db.session import Database
from coupon_site.models.admin import Admin
from coupon_site.models.coupon import Coupon
from coupon_site.schemas.coupon import CouponCreate, CouponUpdate
from coupon_site.services.admin_service import AdminService
from coupon_site.services.coupon_service import CouponService


def test_concurrent_clicks_are_not_lost(database: Database, db_session: Session):
    coupon = CouponService.create_coupon(db_session, CouponCreate(offer="Flash sale", code="FLASH"))
    coupon_id = coupon.id

    def click(_):
        session = database.session()
        try:
            CouponService.increment_clicks(session, coupon_id)
        finally:
            session.close()

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(click, range(50)))

    db_session.expire_all()
    stored = db_session.query(Coupon).filter(Coupon.id == coupon_id).one()
    assert stored.used == 50
    assert stored.today == 50


def test_update_missing_coupon_returns_none(db_session: Session):
    assert CouponService.update_coupon(db_session, "missing", CouponUpdate(offer="x")) is None


def test_get_interactions_missing_raises(db_session: Session):
    with pytest.raises(CouponNotFound):
        CouponService.get_interactions(db_session, "missing")


def test_verify_password():
    hashed = hash_password("StrongPass1")

    assert hashed != "StrongPass1"
    assert verify_password("StrongPass1", hashed) is True
    assert verify_password("WrongPass1", hashed) is False
    assert verify_password("StrongPass1", "not-a-bcrypt-hash") is False


def test_hash_password_rejects_long_passwords():
    with pytest.raises(ValueError):
        hash_password("x" * 73)


def test_token_round_trip(settings: Settings):
    token = create_access_token("admin-123", settings)

    assert validate_token(token, settings) == "admin-123"
    with pytest.raises(InvalidToken):
        validate_token(token + "x", settings)
    with pytest.raises(InvalidToken):
        validate_token("not.a.token", settings)


def test_authenticate(db_session: Session):
    AdminService.ensure_admin(db_session, "owner", "StrongPass1")

    assert AdminService.authenticate(db_session, "owner", "StrongPass1").username == "owner"
    with pytest.raises(InvalidCredentials):
        AdminService.authenticate(db_session, "owner", "nope")


def test_init_db_seeds_admin_once(db_session: Session, settings: Settings):
    init_db(db_session, settings)
    init_db(db_session, settings)

    admins = db_session.query(Admin).all()
    assert len(admins) == 1
    assert admins[0].username == settings.DEFAULT_ADMIN_USERNAME
    assert admins[0].password_hash != settings.DEFAULT_ADMIN_PASSWORD


def test_init_db_requires_admin_in_production(db_session: Session, settings: Settings):
    production = settings.model_copy(
        update={
            "ENVIRONMENT": "production",
            "DEFAULT_ADMIN_PASSWORD": "",
        }
    )

    with pytest.raises(RuntimeError):
        init_db(db_session, production)


def test_database_lifecycle(tmp_path):
    database = Database(f"sqlite:///{tmp_path / 'lifecycle.db'}")
    assert database.is_open is False
    with pytest.raises(RuntimeError):
        database.session()

    database.open()
    database.create_tables()
    session = database.session()
    session.close()
    database.close()

    assert database.is_open is False
