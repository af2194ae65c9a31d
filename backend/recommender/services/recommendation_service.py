"""Recommendation service - loads the target, the candidate pool and user signals, then ranks."""

from dataclasses import dataclass, field

import structlog
from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from recommender.config import settings
from recommender.models.activity import ActivityLog, Favorite, UserSearch
from recommender.models.property import Property
from recommender.services.preferences import (
    UserPreferences,
    build_user_preferences,
    synthetic_snapshot_from_filters,
)
from recommender.services.similarity_scorer import ScoredCandidate, rank_candidates
from recommender.services.snapshot import PropertySnapshot

logger = structlog.get_logger(__name__)

FAVORITES_LIMIT = 20
VIEWS_LIMIT = 30
SEARCHES_LIMIT = 10
BEHAVIOR_PROPERTIES_LIMIT = 30


class PropertyNotFoundError(LookupError):
    """The requested target property does not exist."""

    def __init__(self, property_id: str):
        super().__init__(f"Property {property_id} not found")
        self.property_id = property_id


@dataclass
class RecommendationResult:
    recommendations: list[ScoredCandidate] = field(default_factory=list)
    personalized: bool = False


class RecommendationService:
    """Ranks similar active listings for a property, optionally personalised for a user."""

    def __init__(self, session: AsyncSession, tier_limit: int | None = None):
        self.session = session
        self.tier_limit = tier_limit or settings.candidate_tier_limit

    async def recommend(
        self,
        property_id: str,
        limit: int,
        user_id: str | None = None,
    ) -> RecommendationResult:
        """Return up to *limit* recommendations for *property_id*.

        Raises :class:`PropertyNotFoundError` if the target does not exist.
        """
        target = await self.get_target(property_id)
        if target is None:
            logger.warning("recommendations.property_not_found", property_id=property_id)
            raise PropertyNotFoundError(property_id)

        candidates = await self.fetch_candidates(target)

        preferences = None
        if user_id:
            preferences = await self.load_user_preferences(user_id)

        ranked = rank_candidates(
            target,
            candidates,
            limit=limit,
            preferences=preferences,
            min_score=settings.recommendation_min_score,
        )

        logger.info(
            "recommendations.served",
            property_id=property_id,
            user_id=user_id,
            candidates=len(candidates),
            returned=len(ranked),
            personalized=preferences is not None,
        )
        return RecommendationResult(recommendations=ranked, personalized=preferences is not None)

    async def get_target(self, property_id: str) -> PropertySnapshot | None:
        prop = await self.session.get(Property, property_id)
        if prop is None:
            return None
        return PropertySnapshot.from_model(prop)

    # ------------------------------------------------------------------
    # Candidate pool
    # ------------------------------------------------------------------

    def _base_query(self, target: PropertySnapshot) -> Select:
        query = select(Property).where(
            Property.status == "active",
            Property.id != target.id,
        )
        if target.listing_type:
            query = query.where(Property.listing_type == target.listing_type)
        return query

    async def fetch_candidates(self, target: PropertySnapshot) -> list[PropertySnapshot]:
        """Fetch the candidate pool in four tiers, best matches first.

        1. same city + same type   2. same city
        3. same state + same type  4. same type anywhere
        Tiers are merged in order and de-duplicated by id.
        """
        city = target.city or ""
        state = target.state or ""
        property_type = target.property_type or ""

        base = self._base_query(target)
        tiers = [
            base.where(Property.city == city, Property.property_type == property_type),
            base.where(Property.city == city),
            base.where(Property.state == state, Property.property_type == property_type),
            base.where(Property.property_type == property_type),
        ]

        seen: set[str] = set()
        merged: list[PropertySnapshot] = []
        for query in tiers:
            result = await self.session.execute(
                query.order_by(Property.created_at.desc(), Property.id).limit(self.tier_limit)
            )
            for prop in result.scalars().all():
                if prop.id in seen:
                    continue
                seen.add(prop.id)
                merged.append(PropertySnapshot.from_model(prop))

        logger.debug("recommendations.candidates_fetched", property_id=target.id, count=len(merged))
        return merged

    # ------------------------------------------------------------------
    # Behaviour signals
    # ------------------------------------------------------------------

    async def load_user_preferences(self, user_id: str) -> UserPreferences | None:
        """Build a preference profile from favourites, views and saved searches.

        Returns None when none of the user's favourited or viewed properties
        could be resolved.
        """
        favorites_result = await self.session.execute(
            select(Favorite.property_id)
            .where(Favorite.user_id == user_id)
            .order_by(Favorite.created_at.desc())
            .limit(FAVORITES_LIMIT)
        )
        favorite_ids = list(favorites_result.scalars().all())

        views_result = await self.session.execute(
            select(ActivityLog.metadata_)
            .where(
                ActivityLog.user_id == user_id,
                ActivityLog.activity_type == "property_view",
            )
            .order_by(ActivityLog.created_at.desc())
            .limit(VIEWS_LIMIT)
        )

        searches_result = await self.session.execute(
            select(UserSearch.filters)
            .where(UserSearch.user_id == user_id)
            .order_by(UserSearch.created_at.desc())
            .limit(SEARCHES_LIMIT)
        )
        saved_filters = list(searches_result.scalars().all())

        behavior_ids: list[str] = list(favorite_ids)
        for meta in views_result.scalars().all():
            if not isinstance(meta, dict):
                continue
            for key in ("propertyId", "property_id"):
                if meta.get(key):
                    behavior_ids.append(str(meta[key]))
        behavior_ids = list(dict.fromkeys(behavior_ids))[:BEHAVIOR_PROPERTIES_LIMIT]

        if not behavior_ids:
            return None

        props_result = await self.session.execute(
            select(Property).where(Property.id.in_(behavior_ids))
        )
        behavior_properties = props_result.scalars().all()
        if not behavior_properties:
            return None

        favorite_set = set(favorite_ids)
        weighted: list[PropertySnapshot] = []
        for prop in behavior_properties:
            snap = PropertySnapshot.from_model(prop)
            weighted.append(snap)
            # Favourites count double
            if prop.id in favorite_set:
                weighted.append(snap)

        for filters in saved_filters:
            synthetic = synthetic_snapshot_from_filters(filters)
            if synthetic is not None:
                weighted.append(synthetic)

        logger.debug(
            "recommendations.preferences_built",
            user_id=user_id,
            behavior_properties=len(behavior_properties),
            saved_searches=len(saved_filters),
        )
        return build_user_preferences(weighted)
