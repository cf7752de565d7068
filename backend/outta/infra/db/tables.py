from __future__ import annotations

from sqlalchemy import JSON, Boolean, Column, DateTime, Float, MetaData, Table, Text

metadata = MetaData()

listings_table = Table(
    "listings",
    metadata,
    Column("id", Text, primary_key=True),
    Column("external_id", Text, unique=True),
    Column("title", Text, nullable=False),
    Column("type", Text, nullable=False),
    Column("place_type", Text),
    Column("description", Text),
    Column("street", Text),
    Column("city", Text),
    Column("state", Text),
    Column("zip", Text),
    Column("latitude", Float),
    Column("longitude", Float),
    Column("location_name", Text),
    Column("start_date", DateTime(timezone=True)),
    Column("image", Text),
    Column("unsplash_photo_id", Text),
    Column("organizer", Text),
    Column("website", Text),
    Column("tags", Text),
    Column("recommended", Boolean, nullable=False, default=False),
    Column("hidden", Boolean, nullable=False, default=False),
    Column("place_id", Text),
    Column("google_place_details", JSON(none_as_null=True)),
    Column("place_details_updated_at", DateTime(timezone=True)),
    Column("place_hours_updated_at", DateTime(timezone=True)),
    Column("created_at", DateTime(timezone=True)),
    Column("updated_at", DateTime(timezone=True)),
)

sources_table = Table(
    "sources",
    metadata,
    Column("id", Text, primary_key=True),
    Column("name", Text, nullable=False),
    Column("logo", Text),
    Column("url", Text, nullable=False),
    Column("featured_source", Boolean, nullable=False, default=False),
)
