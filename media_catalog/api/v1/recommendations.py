# media_catalog/api/v1/recommendations.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from ...database import get_async_db
from ...repositories.recommendations import RecommendationsRepository
from ...schemas.recommendation import RecommendationCreate, RecommendationRead, RecommendationUpdate
from ..deps import require_permission

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/recommendations",
    tags=["recommendations"],
    dependencies=[Depends(require_permission("can_edit_projects"))],
)


@router.get("")
async def list_recommendations(db: AsyncSession = Depends(get_async_db)):
    items = await RecommendationsRepository(db, logger).find_all()
    return {"data": [RecommendationRead.model_validate(item).model_dump() for item in items]}


@router.get("/{recommendation_id}")
async def get_recommendation(recommendation_id: int, db: AsyncSession = Depends(get_async_db)):
    item = await RecommendationsRepository(db, logger).find_by_id(recommendation_id)
    return {"data": RecommendationRead.model_validate(item).model_dump()}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_recommendation(data: RecommendationCreate, db: AsyncSession = Depends(get_async_db)):
    item = await RecommendationsRepository(db, logger).create(data.movie_id, data.position)
    return {"data": RecommendationRead.model_validate(item).model_dump()}


@router.put("/{recommendation_id}")
async def update_recommendation(
    recommendation_id: int,
    data: RecommendationUpdate,
    db: AsyncSession = Depends(get_async_db)
):
    item = await RecommendationsRepository(db, logger).update(recommendation_id, data.position)
    return {"data": RecommendationRead.model_validate(item).model_dump()}


@router.delete("/{recommendation_id}")
async def delete_recommendation(recommendation_id: int, db: AsyncSession = Depends(get_async_db)):
    await RecommendationsRepository(db, logger).delete(recommendation_id)
    return {"message": "Recommendation deleted successfully"}
