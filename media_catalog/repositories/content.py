# media_catalog/repositories/content.py
"""
Seasons and episodes owned by a movie.

Season numbers are unique per movie and episode numbers unique per season;
both rules are checked before insert and backed by unique constraints.
"""
import logging
from typing import List, Optional

from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import ConflictError, NotFoundError, TransactionError
from ..models import Episode, Season
from ..schemas.content import EpisodeUpdate, SeasonCreate

module_logger = logging.getLogger(__name__)


class SeasonsRepository:
    def __init__(self, db: AsyncSession, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or module_logger

    async def exists(self, movie_id: int, number: int) -> bool:
        result = await self.db.execute(
            select(exists().where(Season.movie_id == movie_id, Season.number == number))
        )
        return bool(result.scalar())

    async def create(self, movie_id: int, number: int) -> Season:
        """Flushes but does not commit; callers own the transaction"""
        if await self.exists(movie_id, number):
            raise ConflictError(f"Season {number} already exists for movie {movie_id}")
        season = Season(movie_id=movie_id, number=number)
        self.db.add(season)
        await self.db.flush()
        return season

    async def find_by_id(self, season_id: int) -> Season:
        season = await self.db.get(Season, season_id)
        if season is None:
            raise NotFoundError("Season", season_id)
        return season

    async def find_for_movie(self, movie_id: int, season_id: int) -> Season:
        """A season that exists but belongs to another movie is reported as not found"""
        season = await self.find_by_id(season_id)
        if season.movie_id != movie_id:
            raise NotFoundError("Season", season_id)
        return season

    async def find_all_by_movie_id(self, movie_id: int) -> List[Season]:
        result = await self.db.execute(
            select(Season).where(Season.movie_id == movie_id).order_by(Season.number)
        )
        return list(result.scalars().all())

    async def update(self, season: Season, number: int) -> Season:
        if number != season.number and await self.exists(season.movie_id, number):
            raise ConflictError(f"Season {number} already exists for movie {season.movie_id}")
        season.number = number
        await self.db.flush()
        return season

    async def delete(self, season_id: int) -> None:
        """Episodes first, then the season; one transaction"""
        season = await self.find_by_id(season_id)
        try:
            result = await self.db.execute(select(Episode).where(Episode.season_id == season_id))
            for episode in result.scalars().all():
                await self.db.delete(episode)
            await self.db.flush()
            await self.db.delete(season)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            self.logger.error(f"Delete season {season_id} rolled back: {e}")
            raise TransactionError("delete season", e) from e
        self.logger.info(f"Season deleted (ID: {season_id})")


class EpisodesRepository:
    def __init__(self, db: AsyncSession, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or module_logger

    async def exists(self, season_id: int, number: int) -> bool:
        result = await self.db.execute(
            select(exists().where(Episode.season_id == season_id, Episode.number == number))
        )
        return bool(result.scalar())

    async def create(self, season_id: int, number: int, video_url: str = "") -> Episode:
        """Flushes but does not commit; callers own the transaction"""
        if await self.exists(season_id, number):
            raise ConflictError(f"Episode {number} already exists in season {season_id}")
        episode = Episode(season_id=season_id, number=number, video_url=video_url)
        self.db.add(episode)
        await self.db.flush()
        return episode

    async def find_by_id(self, episode_id: int) -> Episode:
        episode = await self.db.get(Episode, episode_id)
        if episode is None:
            raise NotFoundError("Episode", episode_id)
        return episode

    async def find_for_season(self, season_id: int, episode_id: int) -> Episode:
        episode = await self.find_by_id(episode_id)
        if episode.season_id != season_id:
            raise NotFoundError("Episode", episode_id)
        return episode

    async def find_all_by_season_id(self, season_id: int) -> List[Episode]:
        result = await self.db.execute(
            select(Episode).where(Episode.season_id == season_id).order_by(Episode.number)
        )
        return list(result.scalars().all())

    async def update(self, episode: Episode, number: int, video_url: str) -> Episode:
        """Number clashes surface as IntegrityError when the caller commits"""
        episode.number = number
        episode.video_url = video_url
        return episode

    async def save(self) -> None:
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise ConflictError("Episode number already taken in this season") from e

    async def delete(self, episode_id: int) -> None:
        episode = await self.find_by_id(episode_id)
        await self.db.delete(episode)
        await self.db.commit()
        self.logger.info(f"Episode deleted (ID: {episode_id})")


class ContentService:
    """Season + episode writes that span both repositories"""

    def __init__(self, db: AsyncSession, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or module_logger
        self.seasons = SeasonsRepository(db, self.logger)
        self.episodes = EpisodesRepository(db, self.logger)

    async def add_season_with_episodes(self, movie_id: int, data: SeasonCreate) -> Season:
        """
        Create a season and its episodes in one transaction.

        A duplicate season number rejects the whole request; a duplicate
        episode number inside the request is skipped with a warning.
        """
        try:
            season = await self.seasons.create(movie_id, data.number)
            for episode in data.episodes:
                try:
                    await self.episodes.create(season.id, episode.number, episode.video_url)
                except ConflictError:
                    self.logger.warning(
                        f"Skipping duplicate episode {episode.number} in season {data.number} (movie {movie_id})"
                    )
            await self.db.commit()
        except ConflictError:
            await self.db.rollback()
            raise
        except SQLAlchemyError as e:
            await self.db.rollback()
            self.logger.error(f"Add season {data.number} to movie {movie_id} rolled back: {e}")
            raise TransactionError("add season", e) from e

        self.logger.info(f"Season {season.number} added to movie {movie_id} (ID: {season.id})")
        return season

    async def update_season(
        self,
        movie_id: int,
        season_id: int,
        number: int,
        episodes: List[EpisodeUpdate],
    ) -> Season:
        """
        Renumber the season and rewrite the listed episodes.
        Episodes that are missing or belong to another season are skipped.
        """
        season = await self.seasons.find_for_movie(movie_id, season_id)
        try:
            await self.seasons.update(season, number)
            targets = []
            for item in episodes:
                try:
                    episode = await self.episodes.find_for_season(season_id, item.id)
                except NotFoundError:
                    self.logger.warning(f"Episode {item.id} not found in season {season_id}, skipping")
                    continue
                targets.append((episode, item))

            # Park renumbered episodes on unique negative numbers first so
            # that swapping two numbers never collides mid-flush
            for episode, item in targets:
                if episode.number != item.number:
                    episode.number = -episode.id
            await self.db.flush()

            for episode, item in targets:
                await self.episodes.update(episode, item.number, item.video_url)
            await self.db.commit()
        except ConflictError:
            await self.db.rollback()
            raise
        except IntegrityError as e:
            await self.db.rollback()
            raise ConflictError(f"Episode numbers clash in season {season_id}") from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            self.logger.error(f"Update season {season_id} rolled back: {e}")
            raise TransactionError("update season", e) from e

        self.logger.info(f"Season updated (ID: {season_id})")
        return season
