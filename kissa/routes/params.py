"""検索エンドポイント共通のクエリ変換"""
from typing import Optional

from fastapi import HTTPException

from ..errors import ValidationError
from ..services.geo import Coordinate, LocationFilter
from ..services.search import SearchHit


def location_filter(
    lat: Optional[float], lng: Optional[float], radius: float
) -> Optional[LocationFilter]:
    """lat/lng 両方指定時のみ位置検索"""
    if lat is None and lng is None:
        return None
    if lat is None or lng is None:
        raise HTTPException(status_code=422, detail="lat と lng は両方指定してください")
    try:
        return LocationFilter(Coordinate(lat, lng), radius)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))


def hit_distance_km(hit: SearchHit) -> Optional[float]:
    return round(hit.distance_m / 1000, 2) if hit.distance_m is not None else None
