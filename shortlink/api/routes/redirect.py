"""Short code redirection endpoint."""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from starlette.responses import RedirectResponse

from shortlink.api import schemas
from shortlink.api.dependencies import get_shortener_service
from shortlink.core.decorators import log_url_access_decorator
from shortlink.services.exceptions import URLNotFoundError
from shortlink.services.shortener import ShortenedURLService

router = APIRouter(tags=["redirect"])


@router.get(
    "/{short_code}",
    response_class=RedirectResponse,
    status_code=status.HTTP_301_MOVED_PERMANENTLY,
    responses={
        404: {"model": schemas.ErrorResponse, "description": "Short URL not found"},
    }
)
@log_url_access_decorator()
async def redirect_to_original_url(
    request: Request,
    short_code: str,
    shortener_service: ShortenedURLService = Depends(get_shortener_service),
):
    """Permanently redirect a short code to its original URL."""
    try:
        original_url = shortener_service.resolve(short_code)
    except URLNotFoundError:
        raise HTTPException(status_code=404, detail="Short URL not found")

    return RedirectResponse(url=original_url, status_code=status.HTTP_301_MOVED_PERMANENTLY)
