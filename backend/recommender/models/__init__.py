from recommender.models.property import Property
from recommender.models.activity import ActivityLog, Favorite, UserSearch

__all__ = [
    "Property",
    "Favorite",
    "ActivityLog",
    "UserSearch",
]
