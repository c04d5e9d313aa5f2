"""位置計算ユーティリティ — DB非依存のhaversine実装"""
import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, TypeVar

from ..errors import ValidationError

EARTH_RADIUS_M = 6_371_000.0
EARTH_RADIUS_KM = EARTH_RADIUS_M / 1000

MIN_LATITUDE, MAX_LATITUDE = -90.0, 90.0
MIN_LONGITUDE, MAX_LONGITUDE = -180.0, 180.0

# 浮動小数点誤差で円周上の点を落とさないための余白（度）
_BOX_EPSILON_DEG = 1e-9


def _is_number(x) -> bool:
    # boolはintのサブクラスなので除外
    return isinstance(x, (int, float)) and not isinstance(x, bool) and not math.isnan(x)


@dataclass(frozen=True)
class Coordinate:
    """WGS84座標（不変）"""
    latitude: float
    longitude: float

    def __post_init__(self):
        if not _is_number(self.latitude):
            raise ValidationError(f"latitude must be a number, got {self.latitude!r}")
        if not _is_number(self.longitude):
            raise ValidationError(f"longitude must be a number, got {self.longitude!r}")
        if not MIN_LATITUDE <= self.latitude <= MAX_LATITUDE:
            raise ValidationError(f"latitude must be between -90 and 90, got {self.latitude}")
        if not MIN_LONGITUDE <= self.longitude <= MAX_LONGITUDE:
            raise ValidationError(f"longitude must be between -180 and 180, got {self.longitude}")

    @classmethod
    def from_optional(cls, lat: Optional[float], lng: Optional[float]) -> Optional["Coordinate"]:
        """DBのNULL許容カラムから生成。片方でも欠けていればNone"""
        if lat is None or lng is None:
            return None
        return cls(lat, lng)

    def __str__(self) -> str:
        return f"{self.latitude:.6f}, {self.longitude:.6f}"


@dataclass(frozen=True)
class LocationFilter:
    """検索範囲（中心＋半径km）"""
    center: Coordinate
    radius_km: float

    def __post_init__(self):
        if not self.radius_km > 0:
            raise ValidationError(f"radius_km must be positive, got {self.radius_km}")


@dataclass(frozen=True)
class BoundingBox:
    """矩形範囲。min_lon > max_lon のときは日付変更線をまたいでいる"""
    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float

    @property
    def crosses_antimeridian(self) -> bool:
        return self.min_lon > self.max_lon

    def longitude_ranges(self) -> List[Tuple[float, float]]:
        """経度の区間リスト（日付変更線をまたぐ場合は2区間）"""
        if self.crosses_antimeridian:
            return [(self.min_lon, MAX_LONGITUDE), (MIN_LONGITUDE, self.max_lon)]
        return [(self.min_lon, self.max_lon)]

    def contains(self, coord: Coordinate) -> bool:
        if not self.min_lat <= coord.latitude <= self.max_lat:
            return False
        return any(lo <= coord.longitude <= hi for lo, hi in self.longitude_ranges())


def normalize_longitude_delta(delta: float) -> float:
    """経度差を[-180, 180)に正規化"""
    return (delta + 180.0) % 360.0 - 180.0


def distance_m(a: Coordinate, b: Coordinate) -> float:
    """2点間の大円距離をメートルで返す（haversine公式）"""
    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    dphi = math.radians(b.latitude - a.latitude)
    dlambda = math.radians(normalize_longitude_delta(b.longitude - a.longitude))

    h = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    h = min(1.0, max(0.0, h))
    return 2 * EARTH_RADIUS_M * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def distance_km(a: Coordinate, b: Coordinate) -> float:
    return distance_m(a, b) / 1000


def is_within_radius(center: Coordinate, point: Coordinate, radius_m: float) -> bool:
    return distance_m(center, point) <= radius_m


def bounding_box(center: Coordinate, radius_km: float) -> BoundingBox:
    """半径radius_kmの円を必ず含む矩形を返す（粗いフィルタ用）

    緯度方向は子午線上の角距離そのもの。経度方向は接点緯度での最大経度差
    asin(sin(d) / cos(lat)) を使う。単純な radius / (111 * cos(lat)) は
    高緯度で円より狭くなるため使わない。
    """
    angular = radius_km / EARTH_RADIUS_KM  # ラジアン
    lat_delta = math.degrees(angular) + _BOX_EPSILON_DEG

    min_lat = center.latitude - lat_delta
    max_lat = center.latitude + lat_delta

    # 極を含む場合は全経度
    if max_lat >= MAX_LATITUDE or min_lat <= MIN_LATITUDE:
        return BoundingBox(
            min_lat=max(min_lat, MIN_LATITUDE),
            max_lat=min(max_lat, MAX_LATITUDE),
            min_lon=MIN_LONGITUDE,
            max_lon=MAX_LONGITUDE,
        )

    ratio = math.sin(angular) / math.cos(math.radians(center.latitude))
    if ratio >= 1.0 or angular >= math.pi / 2:
        lon_delta = 180.0
    else:
        lon_delta = math.degrees(math.asin(ratio)) + _BOX_EPSILON_DEG

    if lon_delta >= 180.0:
        return BoundingBox(min_lat, max_lat, MIN_LONGITUDE, MAX_LONGITUDE)

    min_lon = center.longitude - lon_delta
    max_lon = center.longitude + lon_delta

    # 日付変更線をまたぐ側だけ反対側へ折り返す
    if min_lon < MIN_LONGITUDE:
        min_lon += 360.0
    if max_lon > MAX_LONGITUDE:
        max_lon -= 360.0

    return BoundingBox(min_lat, max_lat, min_lon, max_lon)


T = TypeVar("T")


def filter_by_distance(items: Iterable[T], location: LocationFilter) -> List[Tuple[T, float]]:
    """矩形→haversine精密計算で半径内の要素を (item, 距離m) で返す。距離の昇順

    item は coordinate 属性（Optional[Coordinate]）を持つこと。
    座標のない要素は除外する。
    """
    bbox = bounding_box(location.center, location.radius_km)
    radius_m = location.radius_km * 1000

    results = []
    for item in items:
        coord = item.coordinate
        if coord is None or not bbox.contains(coord):
            continue
        dist = distance_m(location.center, coord)
        if dist <= radius_m:
            results.append((item, dist))

    results.sort(key=lambda x: x[1])
    return results
