# media_catalog/api/v1/catalog.py
"""
Admin CRUD for the reference tables.

Genres, categories, age ratings and movie types expose the same five
routes, so the routers are built by one factory. Genres, categories and
ages take their poster as an uploaded image (multipart form); movie types
are plain JSON.
"""
from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional, Type
import logging

from ...database import get_async_db
from ...repositories.catalog import (
    AgesRepository, CategoriesRepository, GenresRepository, MovieTypesRepository, ReferenceRepository,
)
from ...schemas.catalog import ReferenceCreate, ReferenceRead, ReferenceUpdate
from ...services.storage import IMAGE_TYPES, StorageService, get_storage
from ..deps import require_permission

logger = logging.getLogger(__name__)


def _serialize(item) -> dict:
    return ReferenceRead.model_validate(item).model_dump()


def build_reference_router(
    prefix: str,
    tag: str,
    repository_class: Type[ReferenceRepository],
    permission: str,
    poster_folder: Optional[str] = None,
) -> APIRouter:
    router = APIRouter(
        prefix=prefix,
        tags=[tag],
        dependencies=[Depends(require_permission(permission))],
    )
    label = repository_class.entity_name

    @router.get("")
    async def list_items(db: AsyncSession = Depends(get_async_db)):
        items = await repository_class(db, logger).find_all()
        return {"total": len(items), "data": [_serialize(item) for item in items]}

    @router.get("/{item_id}")
    async def get_item(item_id: int, db: AsyncSession = Depends(get_async_db)):
        item = await repository_class(db, logger).find_by_id(item_id)
        return {"data": _serialize(item)}

    if poster_folder is None:
        @router.post("", status_code=status.HTTP_201_CREATED)
        async def create_item(data: ReferenceCreate, db: AsyncSession = Depends(get_async_db)):
            item = await repository_class(db, logger).create(data)
            return {"data": {**_serialize(item), "message": f"{label} created successfully"}}

        @router.put("/{item_id}")
        async def update_item(item_id: int, data: ReferenceUpdate, db: AsyncSession = Depends(get_async_db)):
            item = await repository_class(db, logger).update(item_id, data)
            return {"data": _serialize(item)}
    else:
        @router.post("", status_code=status.HTTP_201_CREATED)
        async def create_item(
            title: str = Form(..., min_length=1),
            poster: Optional[UploadFile] = File(None),
            db: AsyncSession = Depends(get_async_db),
            storage: StorageService = Depends(get_storage),
        ):
            poster_url = None
            if poster is not None:
                poster_url = await storage.upload_file(poster, folder=poster_folder, allowed_types=IMAGE_TYPES)
            try:
                item = await repository_class(db, logger).create(ReferenceCreate(title=title, poster_url=poster_url))
            except Exception:
                if poster_url:
                    storage.delete_file(poster_url)
                raise
            return {"data": {**_serialize(item), "message": f"{label} created successfully"}}

        @router.put("/{item_id}")
        async def update_item(
            item_id: int,
            title: Optional[str] = Form(None, min_length=1),
            poster: Optional[UploadFile] = File(None),
            db: AsyncSession = Depends(get_async_db),
            storage: StorageService = Depends(get_storage),
        ):
            """Rename and/or replace the poster; the old poster file is removed"""
            repo = repository_class(db, logger)
            old_poster = (await repo.find_by_id(item_id)).poster_url

            changes = {}
            if title is not None:
                changes["title"] = title
            if poster is not None:
                changes["poster_url"] = await storage.upload_file(
                    poster, folder=poster_folder, allowed_types=IMAGE_TYPES
                )

            item = await repo.update(item_id, ReferenceUpdate(**changes))
            if poster is not None and old_poster and not storage.delete_file(old_poster):
                logger.warning(f"Old {label.lower()} poster {old_poster} was not on disk")
            return {"data": _serialize(item)}

    @router.delete("/{item_id}")
    async def delete_item(item_id: int, db: AsyncSession = Depends(get_async_db)):
        await repository_class(db, logger).delete(item_id)
        return {"message": f"{label} deleted successfully"}

    return router


genres_router = build_reference_router(
    "/genres", "genres", GenresRepository, "can_edit_genres", poster_folder="genres"
)
categories_router = build_reference_router(
    "/categories", "categories", CategoriesRepository, "can_edit_categories", poster_folder="categories"
)
ages_router = build_reference_router(
    "/ages", "ages", AgesRepository, "can_edit_ages", poster_folder="ages"
)
movie_types_router = build_reference_router("/movie-types", "movie-types", MovieTypesRepository, "can_edit_projects")
