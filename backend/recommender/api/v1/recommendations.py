import structlog
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from recommender.api.deps import get_recommendation_service
from recommender.config import settings
from recommender.services.recommendation_service import (
    PropertyNotFoundError,
    RecommendationService,
)
from recommender.services.similarity_scorer import ScoreBreakdown, ScoredCandidate

logger = structlog.get_logger(__name__)

router = APIRouter()


class RecommendationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    property_id: str = Field(alias="propertyId", min_length=1)
    user_id: str | None = Field(default=None, alias="userId")
    limit: int = Field(
        default=settings.recommendation_default_limit,
        ge=1,
        le=settings.recommendation_max_limit,
    )


@router.post("")
async def get_recommendations(
    req: RecommendationRequest,
    service: RecommendationService = Depends(get_recommendation_service),
):
    """Rank active listings similar to ``propertyId``, personalised when ``userId`` is given."""
    try:
        result = await service.recommend(req.property_id, limit=req.limit, user_id=req.user_id)
    except PropertyNotFoundError:
        raise HTTPException(status_code=404, detail="Property not found")
    except Exception as e:
        logger.exception("recommendations.failed", property_id=req.property_id)
        return JSONResponse(status_code=500, content={"error": str(e)})

    return {
        "recommendations": [_candidate_to_dict(c) for c in result.recommendations],
        "personalized": result.personalized,
    }


def _breakdown_to_dict(bd: ScoreBreakdown) -> dict:
    return {
        "type": bd.type,
        "location": bd.location,
        "price": bd.price,
        "bedrooms": bd.bedrooms,
        "bathrooms": bd.bathrooms,
        "area": bd.area,
        "features": bd.features,
        "userType": bd.user_type,
        "userCity": bd.user_city,
        "userPrice": bd.user_price,
        "userBedrooms": bd.user_bedrooms,
        "userFeatures": bd.user_features,
    }


def _candidate_to_dict(c: ScoredCandidate) -> dict:
    return {
        "property": c.property.to_dict(),
        "score": c.score,
        "matchPercentage": c.match_percentage,
        "reasons": list(c.reasons),
        "scoreBreakdown": _breakdown_to_dict(c.score_breakdown),
    }
