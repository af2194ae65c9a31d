"""
SimilarityScorer -- "you may also like" ranking for marketplace listings.

Content factors (additive, max 100 points):
    Type        25  Same property type.
    Location    20  Same city (20) or same state/province (10).
    Price       20  Proximity to the target price.
    Bedrooms    10  Equal (10) or off by one (5).
    Bathrooms    5  Equal.
    Area        10  Proximity to the target floor/land area.
    Features    10  2 points per shared amenity.

Personalisation factors (only with a UserPreferences profile, max +50):
    Type 15, City 15, Price 10, Bedrooms 5, Features 5.

Pure computation: no I/O, no shared state. Missing fields contribute zero.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import asdict, dataclass, field

from recommender.services.preferences import UserPreferences
from recommender.services.snapshot import PropertySnapshot
from recommender.utils.features import extract_feature_keys, feature_label
from recommender.utils.numbers import is_positive, round_half_up

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_LIMIT = 6
MIN_SCORE = 10

CONTENT_MAX_SCORE = 100
PERSONALIZED_MAX_SCORE = 150

SIMILAR_PRICE_PCT = 0.15
SIMILAR_SIZE_PCT = 0.20
MAX_FEATURE_REASONS = 3


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


@dataclass
class ScoreBreakdown:
    type: int = 0
    location: int = 0
    price: int = 0
    bedrooms: int = 0
    bathrooms: int = 0
    area: int = 0
    features: int = 0
    user_type: int = 0
    user_city: int = 0
    user_price: int = 0
    user_bedrooms: int = 0
    user_features: int = 0

    @property
    def total(self) -> int:
        return sum(asdict(self).values())


@dataclass
class ScoredCandidate:
    property: PropertySnapshot
    score: int
    match_percentage: int
    reasons: list[str] = field(default_factory=list)
    score_breakdown: ScoreBreakdown = field(default_factory=ScoreBreakdown)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _same_text(a: str | None, b: str | None) -> bool:
    """Case-insensitive equality; absent values never match."""
    return bool(a) and bool(b) and a.lower() == b.lower()


def _relative_diff(value: float, reference: float) -> float:
    return abs(value - reference) / reference


def match_percentage(score: float, max_score: int = CONTENT_MAX_SCORE) -> int:
    """Map a raw score onto 0-100 for display."""
    return round_half_up(min(1.0, score / max_score) * 100)


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------


def score_property(
    target: PropertySnapshot,
    candidate: PropertySnapshot,
    preferences: UserPreferences | None = None,
) -> ScoredCandidate:
    """Score *candidate* against *target*, optionally boosted by *preferences*."""
    bd = ScoreBreakdown()
    reasons: list[str] = []

    # --- Property type (max 25) ---
    if candidate.property_type and candidate.property_type == target.property_type:
        bd.type = 25
        reasons.append("Same type")

    # --- Location (max 20) ---
    if _same_text(candidate.city, target.city):
        bd.location = 20
        reasons.append("Same area")
    elif _same_text(candidate.state, target.state):
        bd.location = 10
        reasons.append("Same region")

    # --- Price proximity (max 20) ---
    if is_positive(target.price) and is_positive(candidate.price):
        price_diff = _relative_diff(candidate.price, target.price)
        bd.price = round_half_up(max(0.0, 20 - price_diff * 100))
        if price_diff < SIMILAR_PRICE_PCT:
            reasons.append("Similar price")

    # --- Bedrooms (max 10) ---
    if target.bedrooms and candidate.bedrooms:
        if candidate.bedrooms == target.bedrooms:
            bd.bedrooms = 10
            reasons.append("Same bedrooms")
        elif abs(candidate.bedrooms - target.bedrooms) == 1:
            bd.bedrooms = 5

    # --- Bathrooms (max 5) ---
    if target.bathrooms and candidate.bathrooms and candidate.bathrooms == target.bathrooms:
        bd.bathrooms = 5

    # --- Area proximity (max 10) ---
    if is_positive(target.area_sqm) and is_positive(candidate.area_sqm):
        area_diff = _relative_diff(candidate.area_sqm, target.area_sqm)
        bd.area = round_half_up(max(0.0, 10 - area_diff * 50))
        if area_diff < SIMILAR_SIZE_PCT:
            reasons.append("Similar size")

    # --- Feature overlap (max 10) ---
    candidate_features = extract_feature_keys(candidate.features)
    candidate_feature_set = set(candidate_features)
    shared = [f for f in extract_feature_keys(target.features) if f in candidate_feature_set]
    bd.features = min(10, len(shared) * 2)
    reasons.extend(feature_label(f) for f in shared[:MAX_FEATURE_REASONS])

    if preferences is not None:
        _apply_preferences(bd, reasons, candidate, candidate_features, preferences)

    max_score = PERSONALIZED_MAX_SCORE if preferences is not None else CONTENT_MAX_SCORE
    score = bd.total

    return ScoredCandidate(
        property=candidate,
        score=score,
        match_percentage=match_percentage(score, max_score),
        reasons=reasons,
        score_breakdown=bd,
    )


def _apply_preferences(
    bd: ScoreBreakdown,
    reasons: list[str],
    candidate: PropertySnapshot,
    candidate_features: list[str],
    prefs: UserPreferences,
) -> None:
    # --- Preferred type (max 15) ---
    type_count = prefs.preferred_types.get(candidate.property_type or "", 0)
    if candidate.property_type and type_count:
        bd.user_type = min(15, type_count * 5)
        if type_count >= 2 and "Same type" not in reasons:
            reasons.append("Your preferred type")

    # --- Preferred city (max 15) ---
    if candidate.city:
        city_count = prefs.preferred_cities.get(candidate.city.lower(), 0)
        if city_count:
            bd.user_city = min(15, city_count * 5)
            if city_count >= 2 and "Same area" not in reasons:
                reasons.append("Preferred area")

    # --- Budget fit (max 10) ---
    price_range = prefs.price_range
    if price_range is not None and is_positive(candidate.price) and price_range.avg > 0:
        margin = (price_range.max - price_range.min) * 0.3 or price_range.avg * 0.3
        if price_range.min - margin <= candidate.price <= price_range.max + margin:
            avg_diff = _relative_diff(candidate.price, price_range.avg)
            bd.user_price = round_half_up(max(0.0, 10 - avg_diff * 20))
            if avg_diff < 0.2:
                reasons.append("In your budget")

    # --- Preferred bedrooms (max 5) ---
    if candidate.bedrooms:
        bedroom_count = prefs.preferred_bedrooms.get(candidate.bedrooms, 0)
        if bedroom_count:
            bd.user_bedrooms = min(5, bedroom_count * 2)

    # --- Preferred amenities (max 5) ---
    feature_boost = sum(prefs.preferred_features.get(f, 0) for f in candidate_features)
    bd.user_features = min(5, feature_boost)


def rank_candidates(
    target: PropertySnapshot,
    candidates: Iterable[PropertySnapshot],
    limit: int = DEFAULT_LIMIT,
    preferences: UserPreferences | None = None,
    min_score: float = MIN_SCORE,
) -> list[ScoredCandidate]:
    """Score, filter and rank *candidates* against *target*.

    The target itself and candidates scoring at or below *min_score* are
    dropped. Ties keep their pool order.
    """
    if limit <= 0:
        return []

    scored = [
        score_property(target, candidate, preferences)
        for candidate in candidates
        if candidate.id != target.id
    ]
    scored = [s for s in scored if s.score > min_score]
    scored.sort(key=lambda s: s.score, reverse=True)
    return scored[:limit]
