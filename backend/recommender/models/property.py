import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    DateTime,
    Float,
    Index,
    JSON,
    Numeric,
    SmallInteger,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from recommender.database import Base


def _uuid_str() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Property(Base):
    __tablename__ = "properties"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid_str)
    title: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Classification
    property_type: Mapped[str | None] = mapped_column(String(30), nullable=True, index=True)
    listing_type: Mapped[str | None] = mapped_column(String(10), nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="active", index=True)

    # Location
    city: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    state: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Core attributes
    price: Mapped[float | None] = mapped_column(Numeric(16, 2, asdecimal=False), nullable=True)
    bedrooms: Mapped[int | None] = mapped_column(SmallInteger, nullable=True)
    bathrooms: Mapped[int | None] = mapped_column(SmallInteger, nullable=True)
    area_sqm: Mapped[float | None] = mapped_column(Float, nullable=True)

    # Amenity flags, e.g. {"pool": true, "garage": true}
    property_features: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_now, onupdate=_now
    )

    __table_args__ = (
        Index("ix_properties_listing_status", listing_type, status),
    )
