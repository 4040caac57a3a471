import os
import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DATABASE_URL", "sqlite:///./coupon_site_import.db")
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-coupon-site-tests")

from coupon_site.core.config import Settings
from coupon_site.db.session import Database
from coupon_site.main import create_app

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "StrongPass1"
PUBLIC_DIR = Path(__file__).resolve().parent.parent / "public"


@pytest.fixture()
def database() -> Generator[Database, None, None]:
    db_file = tempfile.NamedTemporaryFile(suffix=".db", delete=False)
    db_file.close()

    database = Database(f"sqlite:///{db_file.name}")
    database.open()
    database.create_tables()
    try:
        yield database
    finally:
        database.close()
        os.unlink(db_file.name)


@pytest.fixture()
def settings(database: Database) -> Settings:
    return Settings(
        DATABASE_URL=database.url,
        JWT_SECRET="test-secret-key-for-coupon-site-tests",
        ENVIRONMENT="development",
        DEFAULT_ADMIN_USERNAME=ADMIN_USERNAME,
        DEFAULT_ADMIN_PASSWORD=ADMIN_PASSWORD,
        PUBLIC_DIR=str(PUBLIC_DIR),
    )


@pytest.fixture()
def db_session(database: Database) -> Generator[Session, None, None]:
    session = database.session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(settings: Settings, database: Database) -> Generator[TestClient, None, None]:
    app = create_app(settings=settings, database=database)
    with TestClient(app) as test_client:
        yield test_client
