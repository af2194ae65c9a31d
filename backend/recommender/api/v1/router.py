from fastapi import APIRouter

from recommender.api.v1 import recommendations

api_router = APIRouter()

api_router.include_router(recommendations.router, prefix="/recommendations", tags=["recommendations"])
