"""チェックイン作成サービス"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional, Union

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import DEFAULT_CHECKIN_DISTANCE_METERS, DUPLICATE_CHECKIN_WINDOW_HOURS
from ..errors import RepositoryError
from ..models import CheckIn, Place, STATUS_PUBLISHED
from .checkin_gate import Rejected, ValidateLocationParams, validate_location
from .geo import Coordinate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckinCreated:
    checkin: CheckIn
    distance_m: float


@dataclass(frozen=True)
class PlaceNotFound:
    place_id: int


@dataclass(frozen=True)
class PlaceNotPublished:
    place_id: int


CheckinOutcome = Union[CheckinCreated, PlaceNotFound, PlaceNotPublished, Rejected]


def has_recent_checkin(db: Session, user_id: str, place_id: int, now: datetime) -> bool:
    since = now - timedelta(hours=DUPLICATE_CHECKIN_WINDOW_HOURS)
    return (
        db.query(CheckIn.id)
        .filter(
            CheckIn.user_id == user_id,
            CheckIn.place_id == place_id,
            CheckIn.created_at >= since,
        )
        .first()
        is not None
    )


def get_place(db: Session, place_id: int) -> Optional[Place]:
    try:
        return db.get(Place, place_id)
    except SQLAlchemyError as e:
        logger.error(f"Place lookup failed: {e}")
        raise RepositoryError("failed to find place") from e


def create_checkin(
    db: Session,
    user_id: str,
    place_id: int,
    user_location: Coordinate,
    comment: Optional[str] = None,
    rating: Optional[int] = None,
    is_private: bool = False,
    max_distance_meters: int = DEFAULT_CHECKIN_DISTANCE_METERS,
    now: Optional[datetime] = None,
) -> CheckinOutcome:
    """位置判定を通ったチェックインを保存し、場所のチェックイン数・評価を更新する"""
    now = now or datetime.utcnow()

    place = get_place(db, place_id)
    if place is None:
        return PlaceNotFound(place_id)
    if place.status != STATUS_PUBLISHED:
        return PlaceNotPublished(place_id)

    decision = validate_location(ValidateLocationParams(
        user_location=user_location,
        place_location=place.coordinate,
        max_distance_meters=max_distance_meters,
    ))
    if isinstance(decision, Rejected):
        logger.info(
            f"Checkin rejected: user={user_id} place={place_id} reason={decision.reason} "
            f"distance={decision.distance_m}"
        )
        return decision

    # 24時間以内の重複はログのみ（ブロックしない）。確認に失敗してもチェックインは続行
    try:
        if has_recent_checkin(db, user_id, place_id, now):
            logger.warning(f"Duplicate checkin within {DUPLICATE_CHECKIN_WINDOW_HOURS}h: user={user_id} place={place_id}")
    except SQLAlchemyError as e:
        logger.warning(f"Recent checkin lookup failed, continuing: {e}")

    try:
        checkin = CheckIn(
            user_id=user_id,
            place_id=place_id,
            comment=comment,
            rating=rating,
            user_latitude=user_location.latitude,
            user_longitude=user_location.longitude,
            is_private=is_private,
            created_at=now,
        )
        db.add(checkin)
        db.flush()

        place.checkin_count = (place.checkin_count or 0) + 1
        if rating is not None:
            place.average_rating = (
                db.query(func.avg(CheckIn.rating))
                .filter(CheckIn.place_id == place_id, CheckIn.rating.isnot(None))
                .scalar()
            )

        db.commit()
        db.refresh(checkin)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Checkin creation failed: {e}")
        raise RepositoryError("failed to create checkin") from e

    return CheckinCreated(checkin=checkin, distance_m=decision.distance_m)


def list_place_checkins(db: Session, place_id: int, limit: int = 50) -> List[CheckIn]:
    """公開チェックインを新しい順に"""
    try:
        return (
            db.query(CheckIn)
            .filter(CheckIn.place_id == place_id, CheckIn.is_private.is_(False))
            .order_by(CheckIn.created_at.desc(), CheckIn.id.desc())
            .limit(limit)
            .all()
        )
    except SQLAlchemyError as e:
        logger.error(f"Checkin list failed: {e}")
        raise RepositoryError("failed to list checkins") from e
