"""チェックイン位置判定

ユーザー端末の位置と場所の登録座標の距離で、チェックインを許可するか決める。
結果は Allowed / Rejected の値で返し、例外は使わない。
"""
from dataclasses import dataclass
from typing import Optional, Union

from ..config import DEFAULT_CHECKIN_DISTANCE_METERS, MAX_CHECKIN_DISTANCE_METERS
from ..errors import ValidationError
from .geo import Coordinate, distance_m

REASON_TOO_FAR = "too_far"
REASON_PLACE_LOCATION_UNAVAILABLE = "place_location_unavailable"


@dataclass(frozen=True)
class ValidateLocationParams:
    user_location: Coordinate
    place_location: Optional[Coordinate]
    max_distance_meters: int = DEFAULT_CHECKIN_DISTANCE_METERS

    def __post_init__(self):
        if not 0 < self.max_distance_meters <= MAX_CHECKIN_DISTANCE_METERS:
            raise ValidationError(
                f"max_distance_meters must be in (0, {MAX_CHECKIN_DISTANCE_METERS}], "
                f"got {self.max_distance_meters}"
            )


@dataclass(frozen=True)
class Allowed:
    distance_m: float

    def __bool__(self):
        return True


@dataclass(frozen=True)
class Rejected:
    reason: str
    max_distance_m: int
    distance_m: Optional[float] = None

    def __bool__(self):
        return False

    @property
    def message(self) -> str:
        if self.reason == REASON_PLACE_LOCATION_UNAVAILABLE:
            return "この場所には位置情報が登録されていないため、チェックインできません"
        return (
            f"場所から{self.distance_m:.0f}m離れています"
            f"（{self.max_distance_m}m以内でチェックインしてください）"
        )


LocationDecision = Union[Allowed, Rejected]


def validate_location(params: ValidateLocationParams) -> LocationDecision:
    """距離が上限以内なら Allowed。場所の座標がなければ常に Rejected"""
    if params.place_location is None:
        return Rejected(
            reason=REASON_PLACE_LOCATION_UNAVAILABLE,
            max_distance_m=params.max_distance_meters,
        )

    dist = distance_m(params.user_location, params.place_location)
    if dist <= params.max_distance_meters:
        return Allowed(distance_m=dist)
    return Rejected(
        reason=REASON_TOO_FAR,
        max_distance_m=params.max_distance_meters,
        distance_m=dist,
    )
