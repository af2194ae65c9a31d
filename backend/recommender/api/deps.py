from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from recommender.database import get_db
from recommender.services.recommendation_service import RecommendationService


async def get_recommendation_service(
    db: AsyncSession = Depends(get_db),
) -> RecommendationService:
    return RecommendationService(db)
