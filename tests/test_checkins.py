"""チェックイン作成サービスのテスト — インメモリSQLite"""
import logging
from datetime import datetime, timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from kissa.database import Base
from kissa.errors import RepositoryError
from kissa.models import Region, Place, STATUS_PUBLISHED
from kissa.services import checkins
from kissa.services.checkins import CheckinCreated, create_checkin, list_place_checkins
from kissa.services.geo import Coordinate

CAFE = Coordinate(35.0050, 135.7693)
T0 = datetime(2024, 4, 1, 10, 0, 0)


@pytest.fixture
def db():
    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)
    session = Session(engine)
    session.add(Region(id=1, name="京都", status=STATUS_PUBLISHED))
    session.add(Place(id=1, region_id=1, name="六曜社珈琲店", latitude=CAFE.latitude,
                      longitude=CAFE.longitude, status=STATUS_PUBLISHED))
    session.commit()
    yield session
    session.close()
    engine.dispose()


class TestDuplicateWindow:
    def test_second_checkin_within_window_warns(self, db, caplog):
        caplog.set_level(logging.WARNING, logger="kissa.services.checkins")
        assert isinstance(create_checkin(db, "u1", 1, CAFE, now=T0), CheckinCreated)
        assert not any("Duplicate checkin" in r.getMessage() for r in caplog.records)

        outcome = create_checkin(db, "u1", 1, CAFE, now=T0 + timedelta(hours=1))
        assert isinstance(outcome, CheckinCreated)
        assert any("Duplicate checkin" in r.getMessage() for r in caplog.records)
        assert db.get(Place, 1).checkin_count == 2

    def test_outside_window_does_not_warn(self, db, caplog):
        caplog.set_level(logging.WARNING, logger="kissa.services.checkins")
        create_checkin(db, "u1", 1, CAFE, now=T0)
        create_checkin(db, "u1", 1, CAFE, now=T0 + timedelta(hours=25))
        create_checkin(db, "u2", 1, CAFE, now=T0 + timedelta(hours=25))
        assert not any("Duplicate checkin" in r.getMessage() for r in caplog.records)

    def test_lookup_failure_does_not_block(self, db, monkeypatch, caplog):
        def broken(*args, **kwargs):
            raise OperationalError("SELECT", {}, Exception("database is locked"))

        monkeypatch.setattr(checkins, "has_recent_checkin", broken)
        caplog.set_level(logging.WARNING, logger="kissa.services.checkins")

        outcome = create_checkin(db, "u1", 1, CAFE, now=T0)
        assert isinstance(outcome, CheckinCreated)
        assert outcome.checkin.id is not None
        assert any("Recent checkin lookup failed" in r.getMessage() for r in caplog.records)


class TestRating:
    def test_average_over_ratings(self, db):
        create_checkin(db, "u1", 1, CAFE, rating=2, now=T0)
        create_checkin(db, "u2", 1, CAFE, rating=5, now=T0)
        create_checkin(db, "u3", 1, CAFE, now=T0)
        place = db.get(Place, 1)
        assert place.average_rating == pytest.approx(3.5)
        assert place.checkin_count == 3


def test_list_checkins_repository_error():
    engine = create_engine("sqlite://")
    session = Session(engine)
    try:
        with pytest.raises(RepositoryError):
            list_place_checkins(session, 1)
        with pytest.raises(RepositoryError):
            checkins.get_place(session, 1)
    finally:
        session.close()
        engine.dispose()
