"""Shortening and maintenance endpoints under the API prefix."""

from fastapi import APIRouter, Depends, HTTPException, Path, status

from shortlink.api import schemas
from shortlink.api.dependencies import get_base_url, get_shortener_service
from shortlink.services.exceptions import (
    InvalidInputError,
    InvalidURLError,
    ShortCodeConflictError,
    ShortCodeValidationError,
    URLCreationError,
    URLNotFoundError,
)
from shortlink.services.shortener import ShortenedURLService

router = APIRouter(tags=["shortener"])


@router.post(
    "/shorten",
    response_model=schemas.ShortenResponse,
    status_code=status.HTTP_200_OK,
    responses={
        400: {"model": schemas.ErrorResponse, "description": "Missing or invalid URL"},
    }
)
async def create_short_url(
    url_data: schemas.ShortenRequest,
    shortener_service: ShortenedURLService = Depends(get_shortener_service),
    base_url: str = Depends(get_base_url)
):
    try:
        mapping = shortener_service.create_short_url(url_data.url)
    except (InvalidInputError, InvalidURLError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except URLCreationError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return schemas.ShortenResponse(
        short_code=mapping.short_code,
        short_url=f"{base_url}/{mapping.short_code}",
        original_url=mapping.original_url,
    )


@router.post(
    "/update-shortcode",
    response_model=schemas.SuccessResponse,
    responses={
        400: {"model": schemas.ErrorResponse, "description": "Missing fields or bad short code format"},
        409: {"model": schemas.ErrorResponse, "description": "Short code already exists"}
    }
)
async def update_short_code(
    update_data: schemas.UpdateShortCodeRequest,
    shortener_service: ShortenedURLService = Depends(get_shortener_service),
):
    try:
        shortener_service.rename_short_code(
            old_code=update_data.old_short_code,
            new_code=update_data.new_short_code,
            original_url=update_data.original_url,
        )
    except (InvalidInputError, ShortCodeValidationError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ShortCodeConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return schemas.SuccessResponse(message="Short code updated successfully")


@router.post(
    "/delete-shortcode",
    response_model=schemas.SuccessResponse,
    responses={
        400: {"model": schemas.ErrorResponse, "description": "Short code is required"},
    }
)
async def delete_short_code(
    delete_data: schemas.DeleteShortCodeRequest,
    shortener_service: ShortenedURLService = Depends(get_shortener_service),
):
    try:
        shortener_service.delete_short_code(delete_data.short_code)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return schemas.SuccessResponse(message="Short code deleted successfully")


@router.post(
    "/sync-urls",
    response_model=schemas.SuccessResponse,
    responses={
        400: {"model": schemas.ErrorResponse, "description": "URLs must be an array"},
    }
)
async def sync_urls(
    sync_data: schemas.SyncURLsRequest,
    shortener_service: ShortenedURLService = Depends(get_shortener_service),
):
    shortener_service.sync_urls(sync_data.urls)
    return schemas.SuccessResponse(message="URLs synced successfully")


@router.get(
    "/urls/{short_code}",
    response_model=schemas.URLInfoResponse,
    responses={
        404: {"model": schemas.ErrorResponse, "description": "URL not found"},
    }
)
async def get_url_info(
    short_code: str = Path(..., description="The short code of the URL"),
    shortener_service: ShortenedURLService = Depends(get_shortener_service),
    base_url: str = Depends(get_base_url)
):
    try:
        mapping = shortener_service.get_url_info(short_code)
    except URLNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return schemas.URLInfoResponse(
        short_code=mapping.short_code,
        short_url=f"{base_url}/{mapping.short_code}",
        original_url=mapping.original_url,
        created_at=mapping.created_at,
    )
