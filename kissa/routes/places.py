"""場所・チェックインエンドポイント"""
from typing import Optional, List
from fastapi import APIRouter, Depends, Header, Query, HTTPException
from sqlalchemy.orm import Session

from ..config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, MIN_SEARCH_RADIUS_KM, MAX_SEARCH_RADIUS_KM
from ..database import get_db
from ..models import Place, STATUS_PUBLISHED
from ..repository import SqlCandidateRepository
from ..schemas import (
    PlaceListOut, PlaceListResponse, PaginationOut,
    CheckinCreate, CheckinOut, CheckinRejectedOut,
)
from ..services.checkin_gate import Rejected
from ..services.checkins import (
    create_checkin, get_place, list_place_checkins,
    PlaceNotFound, PlaceNotPublished,
)
from ..services.geo import Coordinate
from ..services.search import SearchQuery, search
from .params import location_filter, hit_distance_km

router = APIRouter(prefix="/api/v1", tags=["places"])


def _place_to_list(place, distance_km=None) -> PlaceListOut:
    return PlaceListOut(
        id=place.id,
        region_id=place.region_id,
        name=place.name,
        category=place.category,
        short_description=place.short_description,
        address=place.address,
        latitude=place.latitude,
        longitude=place.longitude,
        tags=place.tags or [],
        checkin_count=place.checkin_count or 0,
        average_rating=place.average_rating,
        distance_km=distance_km,
    )


@router.get("/places", response_model=PlaceListResponse)
def list_places(
    q: Optional[str] = Query(None, description="フリーワード（名称・説明）"),
    region_id: Optional[int] = Query(None, description="地域ID"),
    category: Optional[str] = Query(None, description="カテゴリ"),
    lat: Optional[float] = Query(None, ge=-90, le=90, description="緯度"),
    lng: Optional[float] = Query(None, ge=-180, le=180, description="経度"),
    radius: float = Query(5.0, ge=MIN_SEARCH_RADIUS_KM, le=MAX_SEARCH_RADIUS_KM, description="半径 (km)"),
    sort: str = Query("created_at", pattern="^(name|created_at|updated_at|visit_count|favorite_count|checkin_count)$"),
    order: str = Query("desc", pattern="^(asc|desc)$"),
    page: int = Query(1, ge=1),
    per_page: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
):
    """公開中の場所を検索。lat/lng 指定時は近い順（sortは無視）"""
    result = search(
        SqlCandidateRepository(db, Place, region_id=region_id, category=category),
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

    return PlaceListResponse(
        data=[_place_to_list(hit.item, hit_distance_km(hit)) for hit in result.items],
        pagination=PaginationOut(
            page=result.current_page,
            per_page=per_page,
            total=result.count,
            pages=result.total_pages,
        ),
    )


@router.post(
    "/places/{place_id}/checkins",
    response_model=CheckinOut,
    status_code=201,
    responses={422: {"model": CheckinRejectedOut}},
)
def post_checkin(
    place_id: int,
    body: CheckinCreate,
    x_user_id: str = Header(..., description="認証済みユーザーID"),
    db: Session = Depends(get_db),
):
    outcome = create_checkin(
        db,
        user_id=x_user_id,
        place_id=place_id,
        user_location=Coordinate(body.latitude, body.longitude),
        comment=body.comment,
        rating=body.rating,
        is_private=body.is_private,
    )

    if isinstance(outcome, PlaceNotFound):
        raise HTTPException(status_code=404, detail="場所が見つかりません")
    if isinstance(outcome, PlaceNotPublished):
        raise HTTPException(status_code=409, detail="公開されていない場所にはチェックインできません")
    if isinstance(outcome, Rejected):
        raise HTTPException(
            status_code=422,
            detail=CheckinRejectedOut(
                reason=outcome.reason,
                message=outcome.message,
                distance_m=round(outcome.distance_m, 1) if outcome.distance_m is not None else None,
                max_distance_m=outcome.max_distance_m,
            ).model_dump(),
        )

    return CheckinOut.model_validate(outcome.checkin).model_copy(
        update={"distance_m": round(outcome.distance_m, 1)}
    )


@router.get("/places/{place_id}/checkins", response_model=List[CheckinOut])
def get_place_checkins(
    place_id: int,
    limit: int = Query(50, ge=1, le=MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
):
    if get_place(db, place_id) is None:
        raise HTTPException(status_code=404, detail="場所が見つかりません")
    return list_place_checkins(db, place_id, limit=limit)
