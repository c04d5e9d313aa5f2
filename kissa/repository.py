"""検索候補の取得（SQLAlchemy）

ProximitySearchEngine から見た候補リポジトリ。キーワード・ステータス・
等値条件で絞り込み、位置検索時は矩形でSQL側の粗いフィルタもかける。
"""
import logging
from typing import Optional, List, Tuple

from sqlalchemy import and_, or_, asc, desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .errors import RepositoryError
from .services.geo import BoundingBox

logger = logging.getLogger(__name__)

SORT_FIELDS = ("name", "created_at", "updated_at", "visit_count", "favorite_count", "checkin_count")


class SqlCandidateRepository:
    """Region / Place 共通の候補リポジトリ"""

    def __init__(self, db: Session, model, **filters):
        self.db = db
        self.model = model
        # region_id=..., category=... などの等値条件（Noneは無視）
        self.filters = {k: v for k, v in filters.items() if v is not None}

    def _base_query(self, keyword: Optional[str], status: Optional[str]):
        model = self.model
        query = self.db.query(model)

        if keyword:
            query = query.filter(
                or_(
                    model.name.contains(keyword),
                    model.description.contains(keyword),
                )
            )

        if status:
            query = query.filter(model.status == status)

        for column, value in self.filters.items():
            query = query.filter(getattr(model, column) == value)

        return query

    def find_candidates(
        self,
        keyword: Optional[str] = None,
        status: Optional[str] = None,
        bbox: Optional[BoundingBox] = None,
    ) -> List:
        """位置検索用の候補を全件返す"""
        model = self.model
        query = self._base_query(keyword, status)

        if bbox is not None:
            lon_conditions = [
                and_(model.longitude >= lo, model.longitude <= hi)
                for lo, hi in bbox.longitude_ranges()
            ]
            query = query.filter(
                model.latitude.isnot(None),
                model.longitude.isnot(None),
                model.latitude >= bbox.min_lat,
                model.latitude <= bbox.max_lat,
                or_(*lon_conditions),
            )

        try:
            return query.all()
        except SQLAlchemyError as e:
            logger.error(f"Candidate fetch failed ({model.__tablename__}): {e}")
            raise RepositoryError(f"failed to fetch {model.__tablename__}") from e

    def find_page(
        self,
        keyword: Optional[str] = None,
        status: Optional[str] = None,
        page: int = 1,
        per_page: int = 20,
        sort: str = "created_at",
        order: str = "desc",
    ) -> Tuple[List, int]:
        """キーワード検索（DB側でソート・LIMIT/OFFSET）"""
        model = self.model
        query = self._base_query(keyword, status)

        column = getattr(model, sort, None) if sort in SORT_FIELDS else None
        if column is None:
            column = model.created_at
        direction = asc if order == "asc" else desc
        query = query.order_by(direction(column), direction(model.id))

        try:
            total = query.count()
            items = query.offset((page - 1) * per_page).limit(per_page).all()
        except SQLAlchemyError as e:
            logger.error(f"Page fetch failed ({model.__tablename__}): {e}")
            raise RepositoryError(f"failed to fetch {model.__tablename__}") from e

        return items, total
