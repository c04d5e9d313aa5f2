"""SQLAlchemy モデル定義"""
from datetime import datetime
from sqlalchemy import (
    Column, String, Text, Integer, Float, Boolean,
    DateTime, ForeignKey, JSON, Index
)
from sqlalchemy.orm import relationship
from .database import Base
from .services.geo import Coordinate

STATUS_DRAFT = "draft"
STATUS_PUBLISHED = "published"
STATUS_ARCHIVED = "archived"


class CoordinateMixin:
    """latitude/longitude カラムを Coordinate として読む"""

    @property
    def coordinate(self):
        return Coordinate.from_optional(self.latitude, self.longitude)


class Region(CoordinateMixin, Base):
    """地域"""
    __tablename__ = "regions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    description = Column(Text)
    short_description = Column(String(300))
    address = Column(String(500))
    latitude = Column(Float)
    longitude = Column(Float)
    status = Column(String(20), nullable=False, default=STATUS_DRAFT, index=True)
    tags = Column(JSON, default=list)
    visit_count = Column(Integer, nullable=False, default=0)
    favorite_count = Column(Integer, nullable=False, default=0)
    place_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    places = relationship("Place", back_populates="region")

    __table_args__ = (
        Index("idx_regions_latlng", "latitude", "longitude"),
    )


class Place(CoordinateMixin, Base):
    """場所（チェックイン対象）"""
    __tablename__ = "places"

    id = Column(Integer, primary_key=True, autoincrement=True)
    region_id = Column(Integer, ForeignKey("regions.id"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text)
    short_description = Column(String(300))
    category = Column(String(50), index=True)
    address = Column(String(500))
    latitude = Column(Float)
    longitude = Column(Float)
    status = Column(String(20), nullable=False, default=STATUS_DRAFT, index=True)
    tags = Column(JSON, default=list)
    visit_count = Column(Integer, nullable=False, default=0)
    favorite_count = Column(Integer, nullable=False, default=0)
    checkin_count = Column(Integer, nullable=False, default=0)
    average_rating = Column(Float)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    region = relationship("Region", back_populates="places")
    checkins = relationship("CheckIn", back_populates="place", cascade="all, delete-orphan")

    __table_args__ = (
        Index("idx_places_latlng", "latitude", "longitude"),
    )


class CheckIn(Base):
    """チェックイン"""
    __tablename__ = "checkins"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, index=True)
    place_id = Column(Integer, ForeignKey("places.id"), nullable=False, index=True)
    comment = Column(Text)
    rating = Column(Integer)
    user_latitude = Column(Float, nullable=False)
    user_longitude = Column(Float, nullable=False)
    is_private = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    place = relationship("Place", back_populates="checkins")
