import json

import structlog
from fastapi import Depends, Request, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from coupon_site.core.config import Settings
from coupon_site.core.exceptions import APIError, AuthError, InvalidToken
from coupon_site.core.security import validate_token
from coupon_site.schemas.coupon import CouponCreate, CouponUpdate

logger = structlog.get_logger()


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def _bearer_token(request: Request) -> str:
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise AuthError("Access denied")

    parts = auth_header.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1].strip():
        raise AuthError("Access denied")
    return parts[1].strip()


def require_admin_token(request: Request) -> str:
    """Reject the request with 403 unless it carries a valid admin bearer token."""
    token = _bearer_token(request)
    try:
        admin_id = validate_token(token, request.app.state.settings)
    except InvalidToken as exc:
        logger.info("admin_token_rejected", reason=str(exc))
        raise AuthError("Invalid token")

    request.state.admin_id = admin_id
    return admin_id


def guard_coupon_mutation(request: Request) -> None:
    """Apply the admin guard to coupon writes when the deployment asks for it."""
    if request.app.state.settings.REQUIRE_AUTH_FOR_MUTATIONS:
        require_admin_token(request)


async def read_body_payload(request: Request) -> dict:
    """Parse a JSON or form-encoded body into a dict; an empty body yields {}."""
    content_type = request.headers.get("content-type", "")
    if "application/json" in content_type:
        raw = await request.body()
        if not raw.strip():
            return {}
        try:
            payload = json.loads(raw)
        except ValueError:
            raise APIError(status.HTTP_422_UNPROCESSABLE_ENTITY, "Validation failed")
    else:
        form = await request.form()
        payload = dict(form)

    return payload if isinstance(payload, dict) else {}


def _build_coupon_payload(schema, payload: dict):
    try:
        return schema(**payload)
    except ValidationError as exc:
        raise RequestValidationError(exc.errors())


async def coupon_create_payload(payload: dict = Depends(read_body_payload)) -> CouponCreate:
    return _build_coupon_payload(CouponCreate, payload)


async def coupon_update_payload(payload: dict = Depends(read_body_payload)) -> CouponUpdate:
    return _build_coupon_payload(CouponUpdate, payload)
