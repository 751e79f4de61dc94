from __future__ import annotations

from collections.abc import Sequence

from timetabler.schemas.clash import Clash, ClashResolution, ResolutionOption
from timetabler.schemas.timetable import TimetableSlot


def _remove_option(slot: TimetableSlot) -> ResolutionOption:
    return ResolutionOption(
        action="remove",
        description=f"Remove {slot.label} ({slot.kind.value})",
        slot_id=slot.id,
    )


def generate_resolutions(clash: Clash) -> list[ResolutionOption]:
    options = [_remove_option(clash.slot_a), _remove_option(clash.slot_b)]
    # A raw time overlap cannot be waived; only a shared-venue warning can be ignored.
    if clash.category == "venue":
        options.append(
            ResolutionOption(
                action="ignore",
                description="Ignore venue clash (not recommended)",
            )
        )
    return options


def suggest_resolutions(clashes: Sequence[Clash]) -> list[ClashResolution]:
    return [ClashResolution(clash_id=clash.id, options=generate_resolutions(clash)) for clash in clashes]


def apply_resolution(slots: Sequence[TimetableSlot], option: ResolutionOption) -> list[TimetableSlot]:
    """Return the slot list that results from choosing ``option``.

    ``ignore`` leaves the slots untouched; suppressing the clash itself is
    up to the caller (see ``WorkingTimetable.apply_resolution``).
    """
    if option.action == "remove" and option.slot_id:
        return [slot for slot in slots if slot.id != option.slot_id]
    return list(slots)
