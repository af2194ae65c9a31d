"""Tests for the recommendation service against an in-memory SQLite database."""

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio

from recommender.models.activity import ActivityLog, Favorite, UserSearch
from recommender.models.property import Property
from recommender.services.recommendation_service import (
    PropertyNotFoundError,
    RecommendationService,
)


def _prop(id: str, **fields) -> Property:
    values = {
        "property_type": "villa",
        "listing_type": "sale",
        "status": "active",
        "city": "Badung",
        "state": "Bali",
        "price": 1_000_000,
        "bedrooms": 3,
        "bathrooms": 2,
        "area_sqm": 200.0,
        "property_features": {"pool": True},
    }
    values.update(fields)
    return Property(id=id, **values)


@pytest_asyncio.fixture
async def listings(db_session):
    db_session.add_all(
        [
            _prop("target"),
            _prop("same-city-type"),
            _prop("same-city", property_type="house"),
            _prop("same-state-type", city="Gianyar"),
            _prop("same-type", city="Jakarta", state="DKI Jakarta"),
            _prop("for-rent", listing_type="rent"),
            _prop("sold", status="sold"),
            _prop("unrelated", property_type="apartment", city="Surabaya", state="Jawa Timur"),
        ]
    )
    await db_session.commit()
    return db_session


class TestFetchCandidates:
    async def test_tiers_in_order(self, listings):
        service = RecommendationService(listings)
        target = await service.get_target("target")

        candidates = await service.fetch_candidates(target)

        assert [c.id for c in candidates] == [
            "same-city-type",
            "same-city",
            "same-state-type",
            "same-type",
        ]

    async def test_tier_limit(self, db_session):
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)

        def at(hours: int) -> datetime:
            return base + timedelta(hours=hours)

        db_session.add_all(
            [
                _prop("target", created_at=at(0)),
                _prop("same-city-type-a", created_at=at(1)),
                _prop("same-city-type-b", created_at=at(2)),
                _prop("same-city-type-c", created_at=at(3)),
                _prop("same-city", property_type="house", created_at=at(4)),
                _prop("same-state-type", city="Gianyar", created_at=at(5)),
                _prop("same-type", city="Jakarta", state="DKI Jakarta", created_at=at(6)),
            ]
        )
        await db_session.commit()
        service = RecommendationService(db_session, tier_limit=1)
        target = await service.get_target("target")

        candidates = await service.fetch_candidates(target)

        # Newest row of each tier; the older same-city villas are cut
        assert [c.id for c in candidates] == [
            "same-city-type-c",
            "same-city",
            "same-state-type",
            "same-type",
        ]

    async def test_tier_limit_keeps_several_per_tier(self, db_session):
        db_session.add_all([_prop("target")] + [_prop(f"villa-{i}") for i in range(3)])
        await db_session.commit()
        target = await RecommendationService(db_session).get_target("target")

        limited = await RecommendationService(db_session, tier_limit=2).fetch_candidates(target)
        unlimited = await RecommendationService(db_session).fetch_candidates(target)

        assert len(limited) == 2
        assert len(unlimited) == 3

    async def test_non_mapping_features_do_not_fail(self, db_session):
        db_session.add_all(
            [
                _prop("target"),
                _prop("bad", property_features=["pool", "garage"]),
            ]
        )
        await db_session.commit()
        service = RecommendationService(db_session)

        result = await service.recommend("target", limit=6)

        [rec] = result.recommendations
        assert rec.property.id == "bad"
        assert rec.property.features == {}
        assert rec.score_breakdown.features == 0


class TestRecommend:
    async def test_unknown_property(self, listings):
        service = RecommendationService(listings)
        with pytest.raises(PropertyNotFoundError):
            await service.recommend("missing", limit=6)

    async def test_content_only(self, listings):
        service = RecommendationService(listings)

        result = await service.recommend("target", limit=6)

        assert result.personalized is False
        ids = [r.property.id for r in result.recommendations]
        assert ids[0] == "same-city-type"
        assert "target" not in ids
        assert "for-rent" not in ids
        assert "sold" not in ids
        scores = [r.score for r in result.recommendations]
        assert scores == sorted(scores, reverse=True)

    async def test_limit(self, listings):
        service = RecommendationService(listings)
        result = await service.recommend("target", limit=2)
        assert len(result.recommendations) == 2

    async def test_user_without_signals(self, listings):
        service = RecommendationService(listings)
        result = await service.recommend("target", limit=6, user_id="nobody")
        assert result.personalized is False


class TestUserPreferences:
    async def test_favourites_views_and_searches(self, listings):
        listings.add_all(
            [
                Favorite(user_id="u1", property_id="same-state-type"),
                ActivityLog(
                    user_id="u1",
                    activity_type="property_view",
                    metadata_={"propertyId": "same-type"},
                ),
                ActivityLog(
                    user_id="u1",
                    activity_type="search",
                    metadata_={"propertyId": "unrelated"},
                ),
                UserSearch(user_id="u1", filters={"propertyType": "villa", "city": "Gianyar"}),
            ]
        )
        await listings.commit()
        service = RecommendationService(listings)

        prefs = await service.load_user_preferences("u1")

        # Favourite counted twice, view once, saved search once
        assert prefs.preferred_types == {"villa": 4}
        assert prefs.preferred_cities == {"gianyar": 3, "jakarta": 1}

    async def test_personalised_flag(self, listings):
        listings.add(Favorite(user_id="u2", property_id="same-city"))
        await listings.commit()
        service = RecommendationService(listings)

        result = await service.recommend("target", limit=6, user_id="u2")

        assert result.personalized is True
        top = result.recommendations[0]
        assert top.score_breakdown.user_city > 0

    async def test_no_resolvable_properties(self, listings):
        listings.add(UserSearch(user_id="u3", filters={"city": "Ubud"}))
        await listings.commit()
        service = RecommendationService(listings)

        assert await service.load_user_preferences("u3") is None
