# media_catalog/api/v1/movies.py
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import logging

from ...database import get_async_db
from ...exceptions import CatalogError
from ...repositories.catalog import validate_movie_references
from ...repositories.movies import MoviesRepository
from ...schemas.movie import MovieFilters, MovieRequest
from ..deps import require_permission

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/movies",
    tags=["movies"],
    dependencies=[Depends(require_permission("can_edit_projects"))],
)


@router.get("")
async def list_movies(
    genre_id: Optional[str] = Query(None, description="Only movies with this genre"),
    category_id: Optional[str] = Query(None, description="Only movies in this category"),
    type_id: Optional[str] = Query(None, description="Only movies of this type"),
    age_id: Optional[str] = Query(None, description="Only movies with this age rating"),
    db: AsyncSession = Depends(get_async_db)
):
    """List movies with their genres, categories, ages and seasons"""
    filters = MovieFilters(genre_id=genre_id, category_id=category_id, type_id=type_id, age_id=age_id)
    try:
        movies = await MoviesRepository(db, logger).find_all(filters)
        return {"total": len(movies), "data": [movie.model_dump() for movie in movies]}
    except (HTTPException, CatalogError):
        raise
    except Exception as e:
        logger.error(f"Error listing movies ({filters}): {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch movies")


@router.get("/{movie_id}")
async def get_movie(movie_id: int, db: AsyncSession = Depends(get_async_db)):
    try:
        movie = await MoviesRepository(db, logger).find_by_id(movie_id)
        return {"data": movie.model_dump()}
    except (HTTPException, CatalogError):
        raise
    except Exception as e:
        logger.error(f"Error fetching movie {movie_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch movie")


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_movie(movie_data: MovieRequest, db: AsyncSession = Depends(get_async_db)):
    """Create a movie; every referenced id must exist"""
    await validate_movie_references(
        db, movie_data.movie_type_id, movie_data.genres, movie_data.categories, movie_data.ages
    )
    movie_id = await MoviesRepository(db, logger).create(movie_data.to_write())
    return {"data": {"id": movie_id, "message": "Movie created successfully"}}


@router.put("/{movie_id}")
async def update_movie(movie_id: int, movie_data: MovieRequest, db: AsyncSession = Depends(get_async_db)):
    """Replace the movie's fields and all of its associations"""
    await validate_movie_references(
        db, movie_data.movie_type_id, movie_data.genres, movie_data.categories, movie_data.ages
    )
    await MoviesRepository(db, logger).update(movie_data.to_write(movie_id))
    return {"data": {"id": movie_id, "message": "Movie updated successfully"}}


@router.delete("/{movie_id}")
async def delete_movie(movie_id: int, db: AsyncSession = Depends(get_async_db)):
    await MoviesRepository(db, logger).delete(movie_id)
    return {"message": "Movie deleted successfully"}
