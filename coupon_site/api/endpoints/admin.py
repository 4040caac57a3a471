from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import structlog

from coupon_site.api.deps import get_app_settings, read_body_payload, require_admin_token
from coupon_site.core.config import Settings
from coupon_site.core.exceptions import InvalidCredentials, StorageError
from coupon_site.core.security import create_access_token
from coupon_site.db.session import get_db
from coupon_site.schemas.admin import AdminLogin, Token
from coupon_site.schemas.coupon import MessageResponse
from coupon_site.services.admin_service import AdminService

router = APIRouter()
logger = structlog.get_logger()


@router.post(
    "/login",
    response_model=Token,
    summary="Login admin",
    description="""
Authenticates the admin with username and password and returns a signed
session token valid for one hour. Accepts JSON or form-encoded bodies.
""",
    responses={
        200: {"description": "Login successful"},
        401: {"description": "Invalid credentials"},
    },
)
async def login(
    payload: dict = Depends(read_body_payload),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    try:
        credentials = AdminLogin(**payload)
    except (ValidationError, TypeError):
        raise InvalidCredentials()

    try:
        admin = await run_in_threadpool(
            AdminService.authenticate, db, credentials.username, credentials.password
        )
    except SQLAlchemyError:
        logger.exception("admin_login_storage_failed")
        raise StorageError("Error during login")

    return {"token": create_access_token(admin.id, settings)}


@router.get("/validateToken", response_model=MessageResponse)
def validate_token(admin_id: str = Depends(require_admin_token)):
    return {"message": "Token is valid"}
