from __future__ import annotations

from collections.abc import Sequence

from pydantic import BaseModel, Field

from timetabler.core.exceptions import ResourceNotFoundError, TimetableValidationError
from timetabler.schemas.clash import Clash, ResolutionOption
from timetabler.schemas.generation import FilteredTimetable
from timetabler.schemas.timetable import CustomSlot, SelectedSubject, TimetableSlot
from timetabler.services.assembler import merge_custom
from timetabler.services.clash_detection import ClashPolicy, find_all_clashes
from timetabler.services.slot_conversion import new_custom_slot

DEFAULT_TIMETABLE_NAME = "My Timetable"


class WorkingTimetable(BaseModel):
    """A student's in-progress timetable, owned and passed around by the caller.

    Every mutation returns a new instance. Clashes are never stored: they
    are recomputed from the current slots on each read, minus the venue
    clashes the student chose to ignore.
    """

    name: str = Field(default=DEFAULT_TIMETABLE_NAME, min_length=1, max_length=200)
    selected_subjects: tuple[SelectedSubject, ...] = ()
    subject_slots: tuple[TimetableSlot, ...] = ()
    custom_slots: tuple[CustomSlot, ...] = ()
    ignored_clash_ids: frozenset[str] = frozenset()

    model_config = {"frozen": True}

    @property
    def slots(self) -> list[TimetableSlot]:
        return merge_custom(self.subject_slots, self.custom_slots)

    def find_clashes(self, *, policy: ClashPolicy | None = None) -> list[Clash]:
        return [
            clash
            for clash in find_all_clashes(self.slots, policy=policy)
            if clash.id not in self.ignored_clash_ids
        ]

    @property
    def clashes(self) -> list[Clash]:
        return self.find_clashes()

    def with_selection(self, selected_subjects: Sequence[SelectedSubject]) -> "WorkingTimetable":
        return self.model_copy(update={"selected_subjects": tuple(selected_subjects)})

    def with_generated(self, slots: Sequence[TimetableSlot] | FilteredTimetable) -> "WorkingTimetable":
        """Replace the subject slots, e.g. with the placed slots of a generation run."""
        if isinstance(slots, FilteredTimetable):
            slots = slots.placed
        subject_slots = tuple(slot for slot in slots if not slot.is_custom)
        return self.model_copy(update={"subject_slots": subject_slots, "ignored_clash_ids": frozenset()})

    def add_slot(self, slot: TimetableSlot) -> "WorkingTimetable":
        if slot.is_custom:
            raise TimetableValidationError(
                "Custom entries must be added with add_custom_slot",
                details={"slot_id": slot.id},
            )
        return self.model_copy(update={"subject_slots": (*self.subject_slots, slot)})

    def remove_slot(self, slot_id: str) -> "WorkingTimetable":
        if any(entry.id == slot_id for entry in self.custom_slots):
            return self.remove_custom_slot(slot_id)
        if not any(slot.id == slot_id for slot in self.subject_slots):
            raise ResourceNotFoundError("Timetable slot", slot_id)
        remaining = tuple(slot for slot in self.subject_slots if slot.id != slot_id)
        return self.model_copy(update={"subject_slots": remaining})

    def clear_slots(self) -> "WorkingTimetable":
        return self.model_copy(update={"subject_slots": (), "ignored_clash_ids": frozenset()})

    def add_custom_slot(self, entry: CustomSlot | None = None, **fields) -> "WorkingTimetable":
        if entry is None:
            entry = new_custom_slot(**fields)
        return self.model_copy(update={"custom_slots": (*self.custom_slots, entry)})

    def update_custom_slot(self, slot_id: str, **updates) -> "WorkingTimetable":
        """Replace a custom entry wholesale with a re-validated copy."""
        updated: list[CustomSlot] = []
        found = False
        for entry in self.custom_slots:
            if entry.id == slot_id:
                found = True
                entry = new_custom_slot(**{**entry.model_dump(), **updates, "id": slot_id})
            updated.append(entry)
        if not found:
            raise ResourceNotFoundError("Custom slot", slot_id)
        return self.model_copy(update={"custom_slots": tuple(updated)})

    def remove_custom_slot(self, slot_id: str) -> "WorkingTimetable":
        if not any(entry.id == slot_id for entry in self.custom_slots):
            raise ResourceNotFoundError("Custom slot", slot_id)
        remaining = tuple(entry for entry in self.custom_slots if entry.id != slot_id)
        return self.model_copy(update={"custom_slots": remaining})

    def clear_custom_slots(self) -> "WorkingTimetable":
        return self.model_copy(update={"custom_slots": ()})

    def apply_resolution(self, clash_id: str, option: ResolutionOption) -> "WorkingTimetable":
        if option.action == "ignore":
            clash = next((item for item in self.find_clashes() if item.id == clash_id), None)
            if clash is None:
                raise ResourceNotFoundError("Clash", clash_id)
            if clash.category != "venue":
                raise TimetableValidationError(
                    "Only venue clashes can be ignored",
                    details={"clash_id": clash_id, "category": clash.category},
                )
            return self.model_copy(update={"ignored_clash_ids": self.ignored_clash_ids | {clash_id}})
        if option.slot_id is None:
            return self
        return self.remove_slot(option.slot_id)

    def reset(self) -> "WorkingTimetable":
        return WorkingTimetable()

    def to_record(self) -> dict:
        """Plain structural record for a persistence collaborator."""
        return {
            "name": self.name,
            "selected_subjects": [selection.model_dump() for selection in self.selected_subjects],
            "timetable_slots": [slot.to_record() for slot in self.subject_slots],
            "custom_slots": [entry.model_dump() for entry in self.custom_slots],
            "ignored_clash_ids": sorted(self.ignored_clash_ids),
        }

    @classmethod
    def from_record(cls, record: dict) -> "WorkingTimetable":
        return cls(
            name=record.get("name") or DEFAULT_TIMETABLE_NAME,
            selected_subjects=tuple(SelectedSubject.model_validate(item) for item in record.get("selected_subjects", [])),
            subject_slots=tuple(
                TimetableSlot.from_record(item)
                for item in record.get("timetable_slots", [])
                if not item.get("isCustom", item.get("is_custom", False))
            ),
            custom_slots=tuple(CustomSlot.model_validate(item) for item in record.get("custom_slots", [])),
            ignored_clash_ids=frozenset(record.get("ignored_clash_ids", [])),
        )
