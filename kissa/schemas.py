"""Pydantic スキーマ定義"""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field


# === リクエスト ===

class CheckinCreate(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    comment: Optional[str] = Field(None, max_length=1000)
    rating: Optional[int] = Field(None, ge=1, le=5)
    is_private: bool = False


# === レスポンス ===

class RegionListOut(BaseModel):
    """一覧用（軽量）"""
    id: int
    name: str
    short_description: Optional[str] = None
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    tags: List[str] = []
    visit_count: int = 0
    favorite_count: int = 0
    place_count: int = 0
    distance_km: Optional[float] = None  # 位置検索時のみ
    class Config:
        from_attributes = True


class PlaceListOut(BaseModel):
    """一覧用（軽量）"""
    id: int
    region_id: int
    name: str
    category: Optional[str] = None
    short_description: Optional[str] = None
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    tags: List[str] = []
    checkin_count: int = 0
    average_rating: Optional[float] = None
    distance_km: Optional[float] = None  # 位置検索時のみ
    class Config:
        from_attributes = True


class PaginationOut(BaseModel):
    page: int
    per_page: int
    total: int
    pages: int


class RegionListResponse(BaseModel):
    data: List[RegionListOut]
    pagination: PaginationOut


class PlaceListResponse(BaseModel):
    data: List[PlaceListOut]
    pagination: PaginationOut


class CheckinOut(BaseModel):
    id: int
    user_id: str
    place_id: int
    comment: Optional[str] = None
    rating: Optional[int] = None
    is_private: bool
    created_at: datetime
    distance_m: Optional[float] = None  # 作成時のみ
    class Config:
        from_attributes = True


class CheckinRejectedOut(BaseModel):
    reason: str
    message: str
    distance_m: Optional[float] = None
    max_distance_m: int


class GeocodeSearchOut(BaseModel):
    query: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    found: bool


class GeocodeReverseOut(BaseModel):
    latitude: float
    longitude: float
    display_name: str
