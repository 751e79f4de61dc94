import pytest
from sqlalchemy import func, select

from timetabler.core.exceptions import CatalogUnavailableError, ResourceNotFoundError
from timetabler.db.seed import SAMPLE_SCHEDULES, SAMPLE_SUBJECTS, SAMPLE_TUTORIAL_GROUPS, seed_catalog
from timetabler.models.class_schedule import ClassSchedule
from timetabler.models.subject import Subject
from timetabler.models.tutorial_group import TutorialGroup
from timetabler.schemas.timetable import SelectedSubject, SlotKind
from timetabler.services.assembler import TimetableAssembler
from timetabler.services.catalog import SqlSessionCatalog


def subject_ids(session_factory):
    with session_factory() as db:
        return {subject.code: subject.id for subject in db.execute(select(Subject)).scalars()}


def tutorial_id(session_factory, code, group_name):
    with session_factory() as db:
        return db.execute(
            select(TutorialGroup.id)
            .join(Subject, Subject.id == TutorialGroup.subject_id)
            .where(Subject.code == code, TutorialGroup.group_name == group_name)
        ).scalar_one()


def test_get_subject(seeded_session_factory):
    ids = subject_ids(seeded_session_factory)
    catalog = SqlSessionCatalog(seeded_session_factory)

    subject = catalog.get_subject(ids["CS101"])

    assert subject.code == "CS101"
    assert subject.name == "Introduction to Programming"
    with pytest.raises(ResourceNotFoundError):
        catalog.get_subject("missing")


def test_list_sessions_is_ordered_by_day_and_time(seeded_session_factory):
    ids = subject_ids(seeded_session_factory)
    catalog = SqlSessionCatalog(seeded_session_factory)

    sessions = catalog.list_sessions(ids["CS101"])

    assert [(item.kind, item.day_of_week, item.start_time, item.end_time) for item in sessions] == [
        ("lecture", 1, "09:00", "10:30"),
        ("lecture", 3, "09:00", "10:30"),
        ("lab", 5, "14:00", "16:00"),
    ]
    assert sessions[2].venue == "Computer Lab 1"
    assert sessions[2].instructor == "Dr. Johnson"


def test_subject_without_sessions_returns_empty_list(seeded_session_factory):
    ids = subject_ids(seeded_session_factory)
    catalog = SqlSessionCatalog(seeded_session_factory)

    assert catalog.list_sessions(ids["CHEM110"]) == []
    with pytest.raises(ResourceNotFoundError):
        catalog.list_sessions("missing")


def test_get_tutorial(seeded_session_factory):
    catalog = SqlSessionCatalog(seeded_session_factory)
    group_id = tutorial_id(seeded_session_factory, "CS101", "Tutorial Group A")

    tutorial = catalog.get_tutorial(group_id)

    assert (tutorial.day_of_week, tutorial.start_time, tutorial.end_time) == (2, "13:00", "14:00")
    assert tutorial.venue == "Room A105"
    with pytest.raises(ResourceNotFoundError) as exc_info:
        catalog.get_tutorial("missing")
    assert exc_info.value.resource_type == "Tutorial group"


def test_database_errors_surface_as_catalog_unavailable(seeded_session_factory):
    ids = subject_ids(seeded_session_factory)
    catalog = SqlSessionCatalog(seeded_session_factory)
    engine = seeded_session_factory.kw["bind"]
    ClassSchedule.__table__.drop(bind=engine)

    with pytest.raises(CatalogUnavailableError) as exc_info:
        catalog.list_sessions(ids["CS101"])
    assert exc_info.value.details == {"operation": "list_sessions", "record_id": ids["CS101"]}


def test_assemble_from_seeded_catalog(seeded_session_factory):
    ids = subject_ids(seeded_session_factory)
    catalog = SqlSessionCatalog(seeded_session_factory)
    assembler = TimetableAssembler(catalog, max_fetch_workers=1)
    selections = [
        SelectedSubject(
            subject_id=ids["CS101"],
            tutorial_group_id=tutorial_id(seeded_session_factory, "CS101", "Tutorial Group A"),
        ),
        SelectedSubject(subject_id=ids["ENG105"]),
        SelectedSubject(subject_id=ids["PHYS101"]),
    ]

    result = assembler.generate_with_clash_filtering(selections)

    assert len(result.placed) == 7
    assert [(slot.subject_code, slot.kind) for slot in result.unplaced] == [("PHYS101", SlotKind.lecture)]
    assert len(result.clashes) == 1
    clash = result.clashes[0]
    assert (clash.category, clash.severity, clash.overlap_minutes) == ("time", "error", 30)
    assert clash.message == "CS101 (lecture) and PHYS101 (lecture) overlap by 30 minutes."
    assert result.skipped == []


def test_seed_catalog_is_idempotent(seeded_session_factory):
    with seeded_session_factory() as db:
        seed_catalog(db)
        db.commit()

        assert db.execute(select(func.count(Subject.id))).scalar_one() == len(SAMPLE_SUBJECTS)
        assert db.execute(select(func.count(ClassSchedule.id))).scalar_one() == len(SAMPLE_SCHEDULES)
        assert db.execute(select(func.count(TutorialGroup.id))).scalar_one() == len(SAMPLE_TUTORIAL_GROUPS)
