"""ジオコーディングエンドポイント"""
from fastapi import APIRouter, Depends, Query, HTTPException

from ..errors import GeocodingError
from ..schemas import GeocodeSearchOut, GeocodeReverseOut
from ..services.geo import Coordinate
from ..services.geocoding import GeocodingClient

router = APIRouter(prefix="/api/v1/geocode", tags=["geocoding"])


def get_geocoder():
    """FastAPI Depends用（リクエスト終了時にセッションを閉じる）"""
    geocoder = GeocodingClient()
    try:
        yield geocoder
    finally:
        geocoder.close()


@router.get("/search", response_model=GeocodeSearchOut)
def geocode_search(
    q: str = Query(..., min_length=1, description="住所"),
    geocoder: GeocodingClient = Depends(get_geocoder),
):
    try:
        coord = geocoder.forward(q)
    except GeocodingError as e:
        raise HTTPException(status_code=502, detail=f"ジオコーディングに失敗しました: {e}")

    if coord is None:
        return GeocodeSearchOut(query=q, found=False)
    return GeocodeSearchOut(query=q, latitude=coord.latitude, longitude=coord.longitude, found=True)


@router.get("/reverse", response_model=GeocodeReverseOut)
def geocode_reverse(
    lat: float = Query(..., ge=-90, le=90, description="緯度"),
    lng: float = Query(..., ge=-180, le=180, description="経度"),
    geocoder: GeocodingClient = Depends(get_geocoder),
):
    """失敗時は座標文字列を返す（エラーにしない）"""
    coord = Coordinate(lat, lng)
    return GeocodeReverseOut(latitude=lat, longitude=lng, display_name=geocoder.describe(coord))
