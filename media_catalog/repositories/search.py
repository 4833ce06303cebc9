# media_catalog/repositories/search.py
"""Admin-panel lookup across users, categories and movies (LIKE, no ranking)"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import String, cast, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Category, Movie, User

module_logger = logging.getLogger(__name__)

LIKE_ESCAPE = "\\"


def like_pattern(query: str) -> str:
    """Substring pattern in which % and _ typed by the user match literally"""
    escaped = (
        query.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def _result(kind: str, entity_id: int, entity: Dict[str, Any], url: str) -> Dict[str, Any]:
    return {"type": kind, "id": entity_id, "entity": entity, "url": url}


class SearchRepository:
    def __init__(self, db: AsyncSession, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or module_logger

    async def search_all(self, query: str) -> List[Dict[str, Any]]:
        pattern = like_pattern(query.lower())
        results = []

        users = await self.db.execute(
            select(User.id, User.name, User.email)
            .where(or_(
                func.lower(User.name).like(pattern, escape=LIKE_ESCAPE),
                func.lower(User.email).like(pattern, escape=LIKE_ESCAPE),
            ))
            .order_by(User.id)
        )
        for row in users:
            results.append(_result(
                "User", row.id, {"id": row.id, "name": row.name, "email": row.email}, f"/users/{row.id}"
            ))

        categories = await self.db.execute(
            select(Category.id, Category.title)
            .where(func.lower(Category.title).like(pattern, escape=LIKE_ESCAPE))
            .order_by(Category.id)
        )
        for row in categories:
            results.append(_result(
                "Category", row.id, {"id": row.id, "title": row.title}, f"/categories/{row.id}"
            ))

        # keywords is a JSON array; matching its text form covers every element
        movies = await self.db.execute(
            select(Movie.id, Movie.title, Movie.cover)
            .where(or_(
                func.lower(Movie.title).like(pattern, escape=LIKE_ESCAPE),
                func.lower(Movie.description).like(pattern, escape=LIKE_ESCAPE),
                func.lower(cast(Movie.keywords, String)).like(pattern, escape=LIKE_ESCAPE),
            ))
            .order_by(Movie.id)
        )
        for row in movies:
            results.append(_result(
                "Movie", row.id, {"id": row.id, "title": row.title, "cover": row.cover or ""}, f"/movies/{row.id}"
            ))

        self.logger.debug(f"Search '{query}' matched {len(results)} entities")
        return results
