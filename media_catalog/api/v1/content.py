# media_catalog/api/v1/content.py
"""Seasons and episodes of a movie"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from ...database import get_async_db
from ...exceptions import NotFoundError
from ...repositories.content import ContentService, EpisodesRepository, SeasonsRepository
from ...repositories.movies import MoviesRepository
from ...schemas.content import SeasonCreate, SeasonUpdate, SingleEpisodeUpdate
from ..deps import require_permission

logger = logging.getLogger(__name__)
router = APIRouter(
    tags=["content"],
    dependencies=[Depends(require_permission("can_edit_projects"))],
)


@router.post("/movies/{movie_id}/seasons", status_code=status.HTTP_201_CREATED)
async def add_season(movie_id: int, data: SeasonCreate, db: AsyncSession = Depends(get_async_db)):
    """Add a season with its episodes; duplicate episode numbers are skipped"""
    if not await MoviesRepository(db, logger).exists(movie_id):
        raise NotFoundError("Movie", movie_id)

    season = await ContentService(db, logger).add_season_with_episodes(movie_id, data)
    return {"data": {"id": season.id, "number": season.number, "message": "Season and episodes added successfully"}}


@router.put("/movies/{movie_id}/seasons/{season_id}")
async def update_season(
    movie_id: int,
    season_id: int,
    data: SeasonUpdate,
    db: AsyncSession = Depends(get_async_db)
):
    season = await ContentService(db, logger).update_season(movie_id, season_id, data.number, data.episodes)
    return {"data": {"id": season.id, "number": season.number, "message": "Season and episodes updated successfully"}}


@router.delete("/movies/{movie_id}/seasons/{season_id}")
async def delete_season(movie_id: int, season_id: int, db: AsyncSession = Depends(get_async_db)):
    seasons = SeasonsRepository(db, logger)
    await seasons.find_for_movie(movie_id, season_id)
    await seasons.delete(season_id)
    return {"message": "Season deleted successfully"}


@router.put("/seasons/{season_id}/episodes/{episode_id}")
async def update_episode(
    season_id: int,
    episode_id: int,
    data: SingleEpisodeUpdate,
    db: AsyncSession = Depends(get_async_db)
):
    episodes = EpisodesRepository(db, logger)
    episode = await episodes.find_for_season(season_id, episode_id)
    await episodes.update(episode, data.number, data.video_url)
    await episodes.save()
    return {
        "data": {
            "id": episode.id,
            "number": episode.number,
            "video_url": episode.video_url,
            "message": "Episode updated successfully",
        }
    }


@router.delete("/seasons/{season_id}/episodes/{episode_id}")
async def delete_episode(season_id: int, episode_id: int, db: AsyncSession = Depends(get_async_db)):
    episodes = EpisodesRepository(db, logger)
    await episodes.find_for_season(season_id, episode_id)
    await episodes.delete(episode_id)
    return {"message": "Episode deleted successfully"}
