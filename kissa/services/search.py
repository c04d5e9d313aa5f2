"""検索サービス — キーワード検索と位置検索（近い順）"""
import logging
import math
from dataclasses import dataclass, field
from typing import Any, List, Optional, Protocol, Tuple

from ..errors import ValidationError
from .geo import BoundingBox, LocationFilter, bounding_box, filter_by_distance

logger = logging.getLogger(__name__)


class CandidateRepository(Protocol):
    def find_candidates(
        self, keyword: Optional[str], status: Optional[str], bbox: Optional[BoundingBox]
    ) -> List[Any]: ...

    def find_page(
        self, keyword: Optional[str], status: Optional[str],
        page: int, per_page: int, sort: str, order: str,
    ) -> Tuple[List[Any], int]: ...


@dataclass(frozen=True)
class SearchQuery:
    keyword: Optional[str] = None
    location: Optional[LocationFilter] = None
    status: Optional[str] = None
    page: int = 1
    per_page: int = 20
    sort: str = "created_at"
    order: str = "desc"

    def __post_init__(self):
        if self.page < 1:
            raise ValidationError(f"page must be >= 1, got {self.page}")
        if self.per_page < 1:
            raise ValidationError(f"per_page must be >= 1, got {self.per_page}")


@dataclass(frozen=True)
class SearchHit:
    item: Any
    distance_m: Optional[float] = None  # 位置検索時のみ


@dataclass(frozen=True)
class SearchResult:
    items: List[SearchHit] = field(default_factory=list)
    count: int = 0
    total_pages: int = 0
    current_page: int = 1


def _total_pages(count: int, per_page: int) -> int:
    return math.ceil(count / per_page) if per_page else 0


def search(repository: CandidateRepository, query: SearchQuery) -> SearchResult:
    """候補リポジトリに対する検索

    位置指定なし: ページングはリポジトリ任せ（距離計算なし）。
    位置指定あり: 矩形→haversineで絞り込み、距離昇順で並べてからページング。
    指定されたソート順は無視する。
    """
    keyword = query.keyword.strip() if query.keyword else None
    keyword = keyword or None

    if query.location is None:
        items, total = repository.find_page(
            keyword, query.status, query.page, query.per_page, query.sort, query.order,
        )
        return SearchResult(
            items=[SearchHit(item) for item in items],
            count=total,
            total_pages=_total_pages(total, query.per_page),
            current_page=query.page,
        )

    bbox = bounding_box(query.location.center, query.location.radius_km)
    candidates = repository.find_candidates(keyword, query.status, bbox)
    ranked = filter_by_distance(candidates, query.location)
    logger.debug(
        f"Proximity search: {len(candidates)} candidates, {len(ranked)} within "
        f"{query.location.radius_km}km"
    )

    count = len(ranked)
    start = (query.page - 1) * query.per_page
    page_items = ranked[start:start + query.per_page]

    return SearchResult(
        items=[SearchHit(item, dist) for item, dist in page_items],
        count=count,
        total_pages=_total_pages(count, query.per_page),
        current_page=query.page,
    )
