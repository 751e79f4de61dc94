import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import timetabler.models  # noqa: F401 registers the catalog tables on Base.metadata
from timetabler.db.base import Base
from timetabler.db.seed import seed_catalog
from timetabler.schemas.timetable import TimetableSlot


@pytest.fixture()
def session_factory():
    engine = create_engine(  # isolated in-memory catalog per test
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    yield TestingSessionLocal

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def seeded_session_factory(session_factory):
    with session_factory() as db:
        seed_catalog(db)
        db.commit()
    return session_factory


@pytest.fixture()
def make_slot():
    def factory(slot_id, code, day, start, end, venue="", kind="lecture", **extra):
        fields = {
            "id": slot_id,
            "subject_id": extra.pop("subject_id", f"subj-{code.lower()}" if code else ""),
            "subject_code": code,
            "subject_name": extra.pop("subject_name", code),
            "type": kind,
            "day_of_week": day,
            "start_time": start,
            "end_time": end,
            "venue": venue,
            "isCustom": kind == "custom",
        }
        fields.update(extra)
        return TimetableSlot(**fields)

    return factory
