"""
User preference profile built from behaviour signals.

Signals are favourited properties, viewed properties and saved searches. Each
is reduced to a PropertySnapshot and counted per attribute; the scorer turns
those counts into bonus points for candidates that match the user's habits.
"""

from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from recommender.services.snapshot import PropertySnapshot
from recommender.utils.features import extract_feature_keys
from recommender.utils.numbers import is_positive, to_float, to_int


@dataclass(frozen=True)
class PriceRange:
    min: float
    max: float
    avg: float


@dataclass
class UserPreferences:
    preferred_types: dict[str, int] = field(default_factory=dict)
    preferred_cities: dict[str, int] = field(default_factory=dict)
    price_range: PriceRange | None = None
    preferred_bedrooms: dict[int, int] = field(default_factory=dict)
    preferred_features: dict[str, int] = field(default_factory=dict)


def build_user_preferences(snapshots: Iterable[PropertySnapshot]) -> UserPreferences:
    """Aggregate attribute counts over *snapshots*.

    A snapshot passed twice counts twice, which is how favourites are weighted.
    """
    types: Counter[str] = Counter()
    cities: Counter[str] = Counter()
    bedrooms: Counter[int] = Counter()
    features: Counter[str] = Counter()
    prices: list[float] = []

    for snap in snapshots:
        if snap.property_type:
            types[snap.property_type] += 1
        if snap.city:
            cities[snap.city.lower()] += 1
        if snap.bedrooms:
            bedrooms[snap.bedrooms] += 1
        if is_positive(snap.price):
            prices.append(snap.price)
        features.update(extract_feature_keys(snap.features))

    price_range = None
    if prices:
        price_range = PriceRange(
            min=min(prices),
            max=max(prices),
            avg=sum(prices) / len(prices),
        )

    return UserPreferences(
        preferred_types=dict(types),
        preferred_cities=dict(cities),
        price_range=price_range,
        preferred_bedrooms=dict(bedrooms),
        preferred_features=dict(features),
    )


def synthetic_snapshot_from_filters(filters: Mapping[str, Any] | None) -> PropertySnapshot | None:
    """Turn saved search filters into a partial snapshot.

    Recognised keys: ``propertyType``, ``city``, ``minPrice`` + ``maxPrice``
    (midpoint) and ``bedrooms``. Returns None when none of them is usable.
    """
    if not filters:
        return None

    values: dict[str, Any] = {}
    if filters.get("propertyType"):
        values["property_type"] = str(filters["propertyType"])
    if filters.get("city"):
        values["city"] = str(filters["city"])

    min_price = to_float(filters.get("minPrice"))
    max_price = to_float(filters.get("maxPrice"))
    if min_price and max_price:
        values["price"] = (min_price + max_price) / 2

    bedrooms = to_int(filters.get("bedrooms"))
    if bedrooms:
        values["bedrooms"] = bedrooms

    if not values:
        return None
    return PropertySnapshot(id="", **values)
