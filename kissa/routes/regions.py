"""地域エンドポイント"""
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..config import (
    DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, MIN_SEARCH_RADIUS_KM, MAX_REGION_SEARCH_RADIUS_KM,
)
from ..database import get_db
from ..models import Region, STATUS_PUBLISHED
from ..repository import SqlCandidateRepository
from ..schemas import RegionListOut, RegionListResponse, PaginationOut
from ..services.search import SearchQuery, search
from .params import location_filter, hit_distance_km

router = APIRouter(prefix="/api/v1", tags=["regions"])


def _region_to_list(region, distance_km=None) -> RegionListOut:
    return RegionListOut(
        id=region.id,
        name=region.name,
        short_description=region.short_description,
        address=region.address,
        latitude=region.latitude,
        longitude=region.longitude,
        tags=region.tags or [],
        visit_count=region.visit_count or 0,
        favorite_count=region.favorite_count or 0,
        place_count=region.place_count or 0,
        distance_km=distance_km,
    )


@router.get("/regions", response_model=RegionListResponse)
def list_regions(
    q: Optional[str] = Query(None, description="フリーワード（名称・説明）"),
    lat: Optional[float] = Query(None, ge=-90, le=90, description="緯度"),
    lng: Optional[float] = Query(None, ge=-180, le=180, description="経度"),
    radius: float = Query(5.0, ge=MIN_SEARCH_RADIUS_KM, le=MAX_REGION_SEARCH_RADIUS_KM, description="半径 (km)"),
    sort: str = Query("created_at", pattern="^(name|created_at|updated_at|visit_count|favorite_count)$"),
    order: str = Query("desc", pattern="^(asc|desc)$"),
    page: int = Query(1, ge=1),
    per_page: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
):
    """公開中の地域を検索。lat/lng 指定時は近い順（sortは無視）"""
    result = search(
        SqlCandidateRepository(db, Region),
        SearchQuery(
            keyword=q,
            location=location_filter(lat, lng, radius),
            status=STATUS_PUBLISHED,
            page=page,
            per_page=per_page,
            sort=sort,
            order=order,
        ),
    )

    return RegionListResponse(
        data=[_region_to_list(hit.item, hit_distance_km(hit)) for hit in result.items],
        pagination=PaginationOut(
            page=result.current_page,
            per_page=per_page,
            total=result.count,
            pages=result.total_pages,
        ),
    )
