#!/usr/bin/env python3
"""開発用サンプルデータ（地域・場所）をDBに投入"""

import sys
from pathlib import Path

# プロジェクトルートをパスに追加
sys.path.insert(0, str(Path(__file__).parent.parent))

from kissa.database import engine, SessionLocal, Base
from kissa.models import Region, Place, STATUS_PUBLISHED, STATUS_DRAFT

# (名称, 緯度, 経度, ステータス, タグ)
REGIONS = [
    ("京都", 35.0116, 135.7681, STATUS_PUBLISHED, ["寺社", "喫茶"]),
    ("東京", 35.6762, 139.6503, STATUS_PUBLISHED, ["喫茶"]),
    ("大阪", 34.6937, 135.5023, STATUS_PUBLISHED, ["食"]),
    ("奈良（準備中）", 34.6851, 135.8048, STATUS_DRAFT, []),
    ("オンライン喫茶", None, None, STATUS_PUBLISHED, ["オンライン"]),
]

# (地域名, 名称, カテゴリ, 緯度, 経度)
PLACES = [
    ("京都", "六曜社珈琲店", "cafe", 35.0050, 135.7693),
    ("京都", "フランソア喫茶室", "cafe", 35.0036, 135.7700),
    ("京都", "進々堂 京大北門前", "cafe", 35.0300, 135.7794),
    ("東京", "喫茶 銀座", "cafe", 35.6717, 139.7650),
    ("大阪", "純喫茶アメリカン", "cafe", 34.6687, 135.5014),
]


def seed(session) -> int:
    regions = {}
    for name, lat, lng, status, tags in REGIONS:
        region = Region(name=name, latitude=lat, longitude=lng, status=status, tags=tags, place_count=0)
        session.add(region)
        regions[name] = region
    session.flush()

    for region_name, name, category, lat, lng in PLACES:
        region = regions[region_name]
        session.add(Place(
            region_id=region.id, name=name, category=category,
            latitude=lat, longitude=lng, status=STATUS_PUBLISHED,
        ))
        region.place_count += 1

    session.commit()
    return len(REGIONS) + len(PLACES)


def main():
    print("🗄️  テーブル作成...")
    Base.metadata.create_all(engine)

    session = SessionLocal()
    try:
        print("📍 地域・場所...")
        n = seed(session)
        print(f"   ✅ {n:,}件")
        print("\n🎉 投入完了!")
    finally:
        session.close()


if __name__ == "__main__":
    main()
