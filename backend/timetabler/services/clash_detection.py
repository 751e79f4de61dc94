from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from timetabler.core.config import Settings
from timetabler.schemas.clash import Clash, ClashCategory, ClashSeverity
from timetabler.schemas.timetable import TimetableSlot
from timetabler.services.time_utils import format_duration, intervals_overlap, overlap_minutes


@dataclass(frozen=True)
class ClashPolicy:
    error_threshold_minutes: int = 30
    # Two sections of the same subject and kind are treated as alternatives, not a clash.
    exempt_same_subject_sessions: bool = True

    @classmethod
    def from_settings(cls, settings: Settings) -> "ClashPolicy":
        return cls(
            error_threshold_minutes=settings.clash_error_threshold_minutes,
            exempt_same_subject_sessions=settings.exempt_same_subject_sessions,
        )


DEFAULT_POLICY = ClashPolicy()


def same_venue(slot_a: TimetableSlot, slot_b: TimetableSlot) -> bool:
    if not slot_a.venue or not slot_b.venue:
        return False
    return slot_a.venue.casefold() == slot_b.venue.casefold()


def slots_clash(slot_a: TimetableSlot, slot_b: TimetableSlot) -> bool:
    if slot_a.day_of_week != slot_b.day_of_week:
        return False
    return intervals_overlap(slot_a.start_time, slot_a.end_time, slot_b.start_time, slot_b.end_time)


def is_exempt_pair(slot_a: TimetableSlot, slot_b: TimetableSlot, policy: ClashPolicy = DEFAULT_POLICY) -> bool:
    if not policy.exempt_same_subject_sessions:
        return False
    if slot_a.is_custom or slot_b.is_custom:
        return False
    return slot_a.subject_id == slot_b.subject_id and slot_a.kind == slot_b.kind


def describe_clash(
    slot_a: TimetableSlot,
    slot_b: TimetableSlot,
    category: ClashCategory,
    overlap: int,
) -> str:
    duration = format_duration(overlap)
    message = f"{slot_a.label} ({slot_a.kind.value}) and {slot_b.label} ({slot_b.kind.value}) "
    if category == "venue":
        return message + f"clash in venue {slot_a.venue} for {duration}."
    return message + f"overlap by {duration}."


def _build_clash(slot_a: TimetableSlot, slot_b: TimetableSlot, policy: ClashPolicy) -> Clash | None:
    if is_exempt_pair(slot_a, slot_b, policy):
        return None
    if not slots_clash(slot_a, slot_b):
        return None

    overlap = overlap_minutes(slot_a.start_time, slot_a.end_time, slot_b.start_time, slot_b.end_time)
    category: ClashCategory = "venue" if same_venue(slot_a, slot_b) else "time"
    severity: ClashSeverity = "error" if overlap >= policy.error_threshold_minutes else "warning"
    return Clash(
        id=f"{category}-{slot_a.id}-{slot_b.id}",
        slot_a=slot_a,
        slot_b=slot_b,
        category=category,
        severity=severity,
        overlap_minutes=overlap,
        message=describe_clash(slot_a, slot_b, category, overlap),
    )


def find_all_clashes(slots: Sequence[TimetableSlot], *, policy: ClashPolicy | None = None) -> list[Clash]:
    """Return every pairwise conflict in ``slots``.

    Pairs are visited as (i, j) with i < j in input order, so the result is
    stable for a given list. A pair that shares a venue is reported once as a
    ``venue`` clash, never additionally as a ``time`` clash.
    """
    active_policy = policy or DEFAULT_POLICY
    clashes: list[Clash] = []
    n = len(slots)
    for i in range(n):
        for j in range(i + 1, n):
            clash = _build_clash(slots[i], slots[j], active_policy)
            if clash is not None:
                clashes.append(clash)
    return clashes


def find_clashes_for_new_slot(
    candidate: TimetableSlot,
    existing_slots: Sequence[TimetableSlot],
    *,
    policy: ClashPolicy | None = None,
) -> list[Clash]:
    all_clashes = find_all_clashes([*existing_slots, candidate], policy=policy)
    return [clash for clash in all_clashes if clash.involves(candidate.id)]


def group_clashes_by_subject(clashes: Sequence[Clash]) -> dict[str, list[Clash]]:
    grouped: dict[str, list[Clash]] = {}
    for clash in clashes:
        # Custom entries have no subject.
        subject_ids = {clash.slot_a.subject_id, clash.slot_b.subject_id} - {""}
        for subject_id in sorted(subject_ids):
            grouped.setdefault(subject_id, []).append(clash)
    return grouped
