"""テスト用DB — 一時SQLiteに固定データを投入"""
import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="kissa-test-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"

import pytest  # noqa: E402

from kissa.database import SessionLocal, init_db  # noqa: E402
from kissa.models import Region, Place, STATUS_PUBLISHED, STATUS_DRAFT  # noqa: E402

KYOTO = (35.0116, 135.7681)
TOKYO = (35.6762, 139.6503)


@pytest.fixture(scope="session", autouse=True)
def seeded():
    """地域・場所のIDを名前で返す"""
    init_db()
    db = SessionLocal()
    try:
        regions = {
            "kyoto": Region(name="京都", description="古都", latitude=KYOTO[0], longitude=KYOTO[1],
                            status=STATUS_PUBLISHED),
            "tokyo": Region(name="東京", description="首都", latitude=TOKYO[0], longitude=TOKYO[1],
                            status=STATUS_PUBLISHED),
            "online": Region(name="オンライン喫茶", status=STATUS_PUBLISHED),
            "nara": Region(name="奈良", latitude=34.6851, longitude=135.8048, status=STATUS_DRAFT),
        }
        db.add_all(regions.values())
        db.flush()

        kyoto_id = regions["kyoto"].id
        places = {
            "rokuyosha": Place(region_id=kyoto_id, name="六曜社珈琲店", category="cafe",
                               latitude=35.0050, longitude=135.7693, status=STATUS_PUBLISHED),
            "francois": Place(region_id=kyoto_id, name="フランソア喫茶室", category="cafe",
                              latitude=35.0036, longitude=135.7700, status=STATUS_PUBLISHED),
            "shinshindo": Place(region_id=kyoto_id, name="進々堂", category="bakery",
                                latitude=35.0300, longitude=135.7794, status=STATUS_PUBLISHED),
            "ginza": Place(region_id=regions["tokyo"].id, name="喫茶 銀座", category="cafe",
                           latitude=35.6717, longitude=139.7650, status=STATUS_PUBLISHED),
            "stand": Place(region_id=kyoto_id, name="移動屋台", category="cafe",
                           status=STATUS_PUBLISHED),
            "draft": Place(region_id=kyoto_id, name="準備中の喫茶", category="cafe",
                           latitude=KYOTO[0], longitude=KYOTO[1], status=STATUS_DRAFT),
        }
        db.add_all(places.values())
        db.commit()

        ids = {f"region:{k}": v.id for k, v in regions.items()}
        ids.update({f"place:{k}": v.id for k, v in places.items()})
    finally:
        db.close()
    return ids
