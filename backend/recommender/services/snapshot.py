"""Read-only property record as consumed by the similarity scorer."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from recommender.models.property import Property
from recommender.utils.numbers import to_float, to_int


def _text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class PropertySnapshot:
    """Immutable view of a listing. Every scored field is optional."""

    id: str
    title: str | None = None
    property_type: str | None = None
    listing_type: str | None = None
    price: float | None = None
    city: str | None = None
    state: str | None = None
    bedrooms: int | None = None
    bathrooms: int | None = None
    area_sqm: float | None = None
    features: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_model(cls, prop: Property) -> "PropertySnapshot":
        features = prop.property_features
        return cls(
            id=str(prop.id),
            title=prop.title,
            property_type=prop.property_type,
            listing_type=prop.listing_type,
            price=to_float(prop.price),
            city=prop.city,
            state=prop.state,
            bedrooms=prop.bedrooms,
            bathrooms=prop.bathrooms,
            area_sqm=to_float(prop.area_sqm),
            features=dict(features) if isinstance(features, Mapping) else {},
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PropertySnapshot":
        """Build a snapshot from a loose record (JSON row, fixture).

        Unknown keys are ignored; malformed numbers become None.
        """
        features = data.get("property_features", data.get("features"))
        return cls(
            id=str(data.get("id") or ""),
            title=_text(data.get("title")),
            property_type=_text(data.get("property_type")),
            listing_type=_text(data.get("listing_type")),
            price=to_float(data.get("price")),
            city=_text(data.get("city")),
            state=_text(data.get("state")),
            bedrooms=to_int(data.get("bedrooms")),
            bathrooms=to_int(data.get("bathrooms")),
            area_sqm=to_float(data.get("area_sqm")),
            features=dict(features) if isinstance(features, Mapping) else {},
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "property_type": self.property_type,
            "listing_type": self.listing_type,
            "price": self.price,
            "city": self.city,
            "state": self.state,
            "bedrooms": self.bedrooms,
            "bathrooms": self.bathrooms,
            "area_sqm": self.area_sqm,
            "property_features": dict(self.features),
        }
