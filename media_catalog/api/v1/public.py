# media_catalog/api/v1/public.py
"""Client-facing routes: auth, profile, homepage, search, movie detail and watchlist"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from ...database import get_async_db
from ...models.user import User
from ...repositories.catalog import AgesRepository, CategoriesRepository, GenresRepository
from ...repositories.movies import MoviesRepository
from ...repositories.recommendations import RecommendationsRepository
from ...repositories.users import UsersRepository
from ...repositories.watchlist import WatchlistRepository
from ...schemas.catalog import ReferenceRead
from ...schemas.movie import MovieFilters
from ...schemas.user import (
    PasswordChange, ProfileUpdate, SignInRequest, SignUpRequest, TokenResponse, UserRead,
)
from ...utils.security import create_access_token
from ..deps import get_current_user

logger = logging.getLogger(__name__)

auth_router = APIRouter(prefix="/auth", tags=["authentication"])
router = APIRouter(tags=["public"])


# ==================== AUTH ====================

@auth_router.post("/sign-up", status_code=status.HTTP_201_CREATED)
async def sign_up(data: SignUpRequest, db: AsyncSession = Depends(get_async_db)):
    user = await UsersRepository(db, logger).create(data.email, data.password, name=data.name)
    return {"data": UserRead.model_validate(user).model_dump()}


@auth_router.post("/sign-in", response_model=TokenResponse)
async def sign_in(data: SignInRequest, db: AsyncSession = Depends(get_async_db)):
    user = await UsersRepository(db, logger).authenticate(data.email, data.password)
    if user is None:
        logger.warning(f"Failed sign-in for {data.email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    logger.info(f"User signed in: {user.email} (ID: {user.id})")
    return TokenResponse(access_token=create_access_token(user.id, role_id=user.role_id))


# ==================== PROFILE ====================

@router.get("/profile")
async def get_profile(current_user: User = Depends(get_current_user)):
    return {"data": UserRead.model_validate(current_user).model_dump()}


@router.put("/profile")
async def update_profile(
    data: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    user = await UsersRepository(db, logger).update_profile(current_user.id, data)
    return {"data": UserRead.model_validate(user).model_dump()}


@router.put("/profile/password")
async def change_password(
    data: PasswordChange,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    changed = await UsersRepository(db, logger).change_password(
        current_user.id, data.current_password, data.new_password
    )
    if not changed:
        raise HTTPException(status_code=400, detail="Current password is incorrect")
    return {"message": "Password changed successfully"}


# ==================== CATALOG ====================

@router.get("/homepage")
async def homepage(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    """Carousel, one shelf of movies per category, and the genre/age pickers"""
    recommended = await RecommendationsRepository(db, logger).recommended_movies()
    categories = await CategoriesRepository(db, logger).find_all()
    genres = await GenresRepository(db, logger).find_all()
    ages = await AgesRepository(db, logger).find_all()

    movies_repo = MoviesRepository(db, logger)
    movies_by_category = {}
    for category in categories:
        movies = await movies_repo.find_all(MovieFilters(category_id=str(category.id)))
        movies_by_category[category.title] = [movie.model_dump() for movie in movies]

    logger.info(f"Homepage loaded: {len(recommended)} recommended, {len(categories)} categories")
    return {
        "data": {
            "recommended": [movie.model_dump() for movie in recommended],
            "movies_by_category": movies_by_category,
            "genres": [ReferenceRead.model_validate(g).model_dump() for g in genres],
            "ages": [ReferenceRead.model_validate(a).model_dump() for a in ages],
        }
    }


@router.get("/search")
async def search_movies(
    query: str = Query(..., min_length=1, description="Part of the movie title"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    movies = await MoviesRepository(db, logger).search(query)
    return {"total": len(movies), "data": [movie.model_dump() for movie in movies]}


@router.get("/search/{category_id}")
async def list_category_movies(
    category_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    await CategoriesRepository(db, logger).find_by_id(category_id)
    movies = await MoviesRepository(db, logger).find_all(MovieFilters(category_id=str(category_id)))
    return {"total": len(movies), "data": [movie.model_dump() for movie in movies]}


@router.get("/movies/{movie_id}")
async def get_movie(
    movie_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    movie = await MoviesRepository(db, logger).find_by_id(movie_id)
    in_watchlist = await WatchlistRepository(db, logger).contains(current_user.id, movie_id)
    return {"data": {**movie.model_dump(), "in_watchlist": in_watchlist}}


# ==================== WATCHLIST ====================

@router.get("/watchlist")
async def get_watchlist(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    movies = await WatchlistRepository(db, logger).list(current_user.id)
    return {"total": len(movies), "data": [movie.model_dump() for movie in movies]}


@router.post("/watchlist/{movie_id}")
async def add_to_watchlist(
    movie_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    if not await MoviesRepository(db, logger).exists(movie_id):
        raise HTTPException(status_code=404, detail=f"Movie {movie_id} not found")
    added = await WatchlistRepository(db, logger).add(current_user.id, movie_id)
    message = "Added to watchlist" if added else "Already in watchlist"
    return {"data": {"movie_id": movie_id, "added": added, "message": message}}


@router.delete("/watchlist/{movie_id}")
async def remove_from_watchlist(
    movie_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    removed = await WatchlistRepository(db, logger).remove(current_user.id, movie_id)
    if not removed:
        raise HTTPException(status_code=404, detail="Movie is not in the watchlist")
    return {"message": "Removed from watchlist"}
