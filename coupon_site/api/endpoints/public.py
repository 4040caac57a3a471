from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse

from coupon_site.core.exceptions import APIError

router = APIRouter()


def _public_file(request: Request, name: str, media_type: str) -> FileResponse:
    path = Path(request.app.state.settings.PUBLIC_DIR) / name
    if not path.is_file():
        raise APIError(404, "Not found")
    return FileResponse(path, media_type=media_type)


@router.get("/robots.txt", include_in_schema=False)
def robots_txt(request: Request):
    return _public_file(request, "robots.txt", "text/plain")


@router.get("/sitemap.xml", include_in_schema=False)
def sitemap_xml(request: Request):
    return _public_file(request, "sitemap.xml", "application/xml")
