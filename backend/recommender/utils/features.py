"""Amenity flag helpers shared by the scorer and the preference builder."""

from collections.abc import Mapping
from typing import Any

# Lower-cased feature key -> display label
FEATURE_LABELS: dict[str, str] = {
    "swimmingpool": "Pool",
    "pool": "Pool",
    "garage": "Garage",
    "parking": "Parking",
    "garden": "Garden",
    "gym": "Gym",
    "security": "Security",
    "cctv": "CCTV",
    "elevator": "Elevator",
    "airconditioner": "AC",
    "wifi": "WiFi",
    "balcony": "Balcony",
    "furnished": "Furnished",
    "beachaccess": "Beach Access",
}


def is_asserted(value: Any) -> bool:
    """A flag counts when stored as ``True``, ``"true"`` or the number ``1``."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value == 1
    return value == "true"


def extract_feature_keys(features: Mapping[str, Any] | None) -> list[str]:
    """Return the lower-cased keys of asserted flags, in map order, without duplicates."""
    if not features:
        return []
    keys = (str(k).lower() for k, v in features.items() if is_asserted(v))
    return list(dict.fromkeys(keys))


def feature_label(key: str) -> str:
    """Human-readable label for a feature key, falling back to the key itself."""
    return FEATURE_LABELS.get(key, key)
