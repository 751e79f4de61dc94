from __future__ import annotations

from pydantic import ValidationError

from timetabler.core.exceptions import TimetableValidationError
from timetabler.schemas.catalog import ScheduledSession, TutorialGroupRecord
from timetabler.schemas.timetable import SESSION_KINDS, CustomSlot, SlotKind, TimetableSlot
from timetabler.services.time_utils import validate_day_of_week

DEFAULT_FALLBACK_COLOR = "#6B7280"


def parse_session_kind(value: str | SlotKind) -> SlotKind:
    try:
        kind = SlotKind(value)
    except ValueError as exc:
        raise TimetableValidationError(
            f"Unknown session kind {value!r}",
            details={"kind": value},
        ) from exc
    if kind not in SESSION_KINDS:
        raise TimetableValidationError(
            f"Session kind {kind.value!r} cannot come from a stored schedule",
            details={"kind": kind.value},
        )
    return kind


def resolve_slot_color(
    kind: SlotKind | str | None,
    explicit_color: str | None = None,
    *,
    fallback: str = DEFAULT_FALLBACK_COLOR,
) -> str:
    if explicit_color:
        return explicit_color
    if kind is None:
        return fallback
    try:
        return SlotKind(kind).default_color
    except ValueError:
        return fallback


def _build_slot(record_label: str, record_id: str, day_of_week: int, **fields) -> TimetableSlot:
    validate_day_of_week(day_of_week)
    try:
        return TimetableSlot(id=record_id, day_of_week=day_of_week, **fields)
    except ValidationError as exc:
        raise TimetableValidationError(
            f"Invalid {record_label} {record_id}",
            details={"errors": exc.errors(include_url=False)},
        ) from exc


def from_scheduled_session(session: ScheduledSession, subject_code: str, subject_name: str) -> TimetableSlot:
    kind = parse_session_kind(session.kind)
    return _build_slot(
        "scheduled session",
        session.id,
        session.day_of_week,
        subject_id=session.subject_id,
        subject_code=subject_code,
        subject_name=subject_name,
        kind=kind,
        start_time=session.start_time,
        end_time=session.end_time,
        venue=session.venue or "",
        instructor=session.instructor,
        color=resolve_slot_color(kind),
        is_custom=False,
    )


def from_tutorial_group(tutorial: TutorialGroupRecord, subject_code: str, subject_name: str) -> TimetableSlot:
    return _build_slot(
        "tutorial group",
        tutorial.id,
        tutorial.day_of_week,
        subject_id=tutorial.subject_id,
        subject_code=subject_code,
        subject_name=subject_name,
        kind=SlotKind.tutorial,
        start_time=tutorial.start_time,
        end_time=tutorial.end_time,
        venue=tutorial.venue or "",
        instructor=tutorial.instructor,
        color=resolve_slot_color(SlotKind.tutorial),
        is_custom=False,
    )


def from_custom_entry(entry: CustomSlot) -> TimetableSlot:
    return _build_slot(
        "custom entry",
        entry.id,
        entry.day_of_week,
        subject_id="",
        subject_code="",
        subject_name=entry.title,
        kind=SlotKind.custom,
        start_time=entry.start_time,
        end_time=entry.end_time,
        venue=entry.venue or "",
        instructor=None,
        color=resolve_slot_color(SlotKind.custom, entry.color),
        is_custom=True,
    )


def new_custom_slot(**fields) -> CustomSlot:
    """Build a CustomSlot, generating an id when none is supplied."""
    try:
        return CustomSlot(**fields)
    except ValidationError as exc:
        raise TimetableValidationError(
            "Invalid custom entry",
            details={"errors": exc.errors(include_url=False)},
        ) from exc
