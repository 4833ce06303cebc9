# media_catalog/api/v1/media.py
from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import logging

from ...database import get_async_db
from ...repositories.movies import MoviesRepository
from ...services.storage import IMAGE_TYPES, StorageService, get_storage
from ..deps import require_permission

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/media",
    tags=["media"],
    dependencies=[Depends(require_permission("can_edit_projects"))],
)


@router.get("/movies/{movie_id}")
async def get_movie_media(movie_id: int, db: AsyncSession = Depends(get_async_db)):
    media = await MoviesRepository(db, logger).get_media(movie_id)
    return {"data": media.model_dump()}


@router.patch("/movies/{movie_id}")
async def upload_movie_media(
    movie_id: int,
    cover: Optional[UploadFile] = File(None),
    screenshots: Optional[List[UploadFile]] = File(None),
    db: AsyncSession = Depends(get_async_db),
    storage: StorageService = Depends(get_storage),
):
    """Replace the cover and/or append screenshots"""
    repo = MoviesRepository(db, logger)
    if not await repo.exists(movie_id):
        raise HTTPException(status_code=404, detail=f"Movie {movie_id} not found")
    if cover is None and not screenshots:
        raise HTTPException(status_code=400, detail="No files uploaded")

    cover_url = None
    if cover is not None:
        cover_url = await storage.upload_file(cover, folder=f"movies/{movie_id}", allowed_types=IMAGE_TYPES)

    screenshot_urls = [
        await storage.upload_file(shot, folder=f"movies/{movie_id}/screenshots", allowed_types=IMAGE_TYPES)
        for shot in screenshots or []
    ]

    media = await repo.update_media(movie_id, cover=cover_url, screenshots=screenshot_urls)
    logger.info(f"Media updated for movie {movie_id}: cover={cover_url is not None}, screenshots={len(screenshot_urls)}")
    return {"data": media.model_dump()}


@router.post("/movies/{movie_id}/media")
async def upload_single_movie_media(
    movie_id: int,
    media_type: str = Form(..., alias="type", pattern="^(cover|screenshot)$"),
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_async_db),
    storage: StorageService = Depends(get_storage),
):
    """Upload one file as the cover or as one more screenshot"""
    repo = MoviesRepository(db, logger)
    if not await repo.exists(movie_id):
        raise HTTPException(status_code=404, detail=f"Movie {movie_id} not found")

    if media_type == "cover":
        url = await storage.upload_file(file, folder=f"movies/{movie_id}", allowed_types=IMAGE_TYPES)
        media = await repo.update_media(movie_id, cover=url)
    else:
        url = await storage.upload_file(file, folder=f"movies/{movie_id}/screenshots", allowed_types=IMAGE_TYPES)
        media = await repo.update_media(movie_id, screenshots=[url])

    logger.info(f"Uploaded {media_type} for movie {movie_id}: {url}")
    return {"data": {**media.model_dump(), "url": url}}


@router.delete("/movies/{movie_id}")
async def delete_movie_media(
    movie_id: int,
    path: str = Query(..., min_length=1, description="Cover or screenshot URL to remove"),
    db: AsyncSession = Depends(get_async_db),
    storage: StorageService = Depends(get_storage),
):
    media = await MoviesRepository(db, logger).remove_media(movie_id, path)
    if not storage.delete_file(path):
        logger.warning(f"Media file {path} was not on disk")
    return {"data": media.model_dump()}
