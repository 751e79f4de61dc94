import pytest

from timetabler.core.exceptions import ResourceNotFoundError, TimetableValidationError
from timetabler.schemas.clash import ResolutionOption
from timetabler.schemas.generation import FilteredTimetable
from timetabler.schemas.timetable import SelectedSubject
from timetabler.services.resolution import generate_resolutions
from timetabler.services.working_timetable import DEFAULT_TIMETABLE_NAME, WorkingTimetable


@pytest.fixture()
def lectures(make_slot):
    return [
        make_slot("cs-lec", "CS101", 1, "09:00", "10:30", "Room A101"),
        make_slot("math-lec", "MATH201", 1, "10:00", "11:30", "Room A101"),
    ]


def test_new_timetable_is_empty():
    timetable = WorkingTimetable()

    assert timetable.name == DEFAULT_TIMETABLE_NAME
    assert timetable.slots == []
    assert timetable.clashes == []


def test_clashes_are_recomputed_from_slots(lectures):
    timetable = WorkingTimetable().add_slot(lectures[0])
    assert timetable.clashes == []

    timetable = timetable.add_slot(lectures[1])
    assert [clash.id for clash in timetable.clashes] == ["venue-cs-lec-math-lec"]

    timetable = timetable.remove_slot("math-lec")
    assert timetable.clashes == []


def test_mutations_return_new_instances(lectures):
    original = WorkingTimetable()
    updated = original.add_slot(lectures[0])

    assert original.subject_slots == ()
    assert updated.subject_slots == (lectures[0],)


def test_with_generated_uses_placed_slots(lectures, make_slot):
    job = make_slot("job", "", 1, "09:00", "10:00", kind="custom", subject_name="Job")
    filtered = FilteredTimetable(placed=[lectures[0], job], unplaced=[lectures[1]])

    timetable = WorkingTimetable().with_generated(filtered)

    assert timetable.subject_slots == (lectures[0],)


def test_custom_slots_join_clash_detection(lectures):
    timetable = WorkingTimetable().with_generated(lectures[:1]).add_custom_slot(
        title="Part-time job", day_of_week=1, start_time="10:00", end_time="12:00"
    )

    clashes = timetable.clashes

    assert len(clashes) == 1
    assert clashes[0].slot_b.is_custom is True
    assert clashes[0].severity == "error"


def test_update_custom_slot_keeps_id_and_revalidates():
    timetable = WorkingTimetable().add_custom_slot(
        title="Gym", day_of_week=3, start_time="18:00", end_time="19:00"
    )
    entry_id = timetable.custom_slots[0].id

    updated = timetable.update_custom_slot(entry_id, end_time="20:00")

    assert updated.custom_slots[0].id == entry_id
    assert updated.custom_slots[0].end_time == "20:00"
    with pytest.raises(TimetableValidationError):
        timetable.update_custom_slot(entry_id, end_time="17:00")
    with pytest.raises(ResourceNotFoundError):
        timetable.update_custom_slot("missing", title="Nope")


def test_remove_slot_handles_custom_entries_and_unknown_ids(lectures):
    timetable = WorkingTimetable().add_slot(lectures[0]).add_custom_slot(
        title="Gym", day_of_week=3, start_time="18:00", end_time="19:00"
    )
    entry_id = timetable.custom_slots[0].id

    assert timetable.remove_slot(entry_id).custom_slots == ()
    with pytest.raises(ResourceNotFoundError):
        timetable.remove_slot("missing")
    with pytest.raises(ResourceNotFoundError):
        timetable.remove_custom_slot("cs-lec")


def test_ignoring_a_venue_clash_hides_it(lectures):
    timetable = WorkingTimetable().with_generated(lectures)
    clash = timetable.clashes[0]
    ignore = generate_resolutions(clash)[-1]

    resolved = timetable.apply_resolution(clash.id, ignore)

    assert resolved.clashes == []
    assert len(resolved.slots) == 2
    assert len(resolved.find_clashes()) == 0


def test_remove_resolution_drops_the_slot(lectures):
    timetable = WorkingTimetable().with_generated(lectures)
    clash = timetable.clashes[0]

    resolved = timetable.apply_resolution(
        clash.id, ResolutionOption(action="remove", description="Remove MATH201 (lecture)", slot_id="math-lec")
    )

    assert [slot.id for slot in resolved.slots] == ["cs-lec"]


def test_clear_and_reset(lectures):
    timetable = (
        WorkingTimetable(name="Semester 1")
        .with_selection([SelectedSubject(subject_id="subj-cs101")])
        .with_generated(lectures)
        .add_custom_slot(title="Gym", day_of_week=3, start_time="18:00", end_time="19:00")
    )

    assert timetable.clear_slots().subject_slots == ()
    assert timetable.clear_slots().custom_slots != ()
    assert timetable.clear_custom_slots().custom_slots == ()
    assert timetable.reset() == WorkingTimetable()


def test_record_round_trip(lectures):
    timetable = (
        WorkingTimetable(name="Semester 1")
        .with_selection([SelectedSubject(subject_id="subj-cs101", tutorial_group_id="tut-a")])
        .with_generated(lectures)
        .add_custom_slot(title="Gym", day_of_week=3, start_time="18:00", end_time="19:00")
    )
    timetable = timetable.apply_resolution(
        timetable.clashes[0].id, ResolutionOption(action="ignore", description="Ignore venue clash")
    )

    record = timetable.to_record()

    assert record["timetable_slots"][0]["type"] == "lecture"
    assert record["ignored_clash_ids"] == ["venue-cs-lec-math-lec"]
    assert WorkingTimetable.from_record(record) == timetable


def test_from_record_defaults_missing_fields():
    timetable = WorkingTimetable.from_record({})

    assert timetable == WorkingTimetable()


def test_time_clash_cannot_be_ignored(make_slot):
    timetable = WorkingTimetable().with_generated(
        [
            make_slot("cs-lec", "CS101", 1, "09:00", "10:30", "Room A101"),
            make_slot("math-lec", "MATH201", 1, "10:00", "11:30", "Room B201"),
        ]
    )
    clash = timetable.clashes[0]

    with pytest.raises(TimetableValidationError):
        timetable.apply_resolution(clash.id, ResolutionOption(action="ignore", description="Ignore"))
    assert [item.id for item in timetable.clashes] == ["time-cs-lec-math-lec"]


def test_ignoring_an_unknown_clash_is_rejected(lectures):
    timetable = WorkingTimetable().with_generated(lectures)

    with pytest.raises(ResourceNotFoundError):
        timetable.apply_resolution("venue-x-y", ResolutionOption(action="ignore", description="Ignore"))


def test_add_slot_rejects_custom_entries(make_slot):
    job = make_slot("job", "", 1, "09:00", "10:00", kind="custom", subject_name="Job")

    with pytest.raises(TimetableValidationError):
        WorkingTimetable().add_slot(job)


def test_custom_entries_survive_record_round_trip():
    timetable = WorkingTimetable().add_custom_slot(
        id="job", title="Job", day_of_week=1, start_time="09:00", end_time="10:00"
    )

    restored = WorkingTimetable.from_record(timetable.to_record())

    assert [slot.id for slot in restored.slots] == ["job"]
    assert restored.slots[0].is_custom is True
