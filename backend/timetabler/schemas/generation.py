from __future__ import annotations

from pydantic import BaseModel, Field

from timetabler.schemas.clash import Clash
from timetabler.schemas.timetable import TimetableSlot


class SkippedSelection(BaseModel):
    subject_id: str
    tutorial_group_id: str | None = None
    reason: str


class AssemblyResult(BaseModel):
    slots: list[TimetableSlot] = Field(default_factory=list)
    skipped: list[SkippedSelection] = Field(default_factory=list)


class FilteredTimetable(BaseModel):
    placed: list[TimetableSlot] = Field(default_factory=list)
    unplaced: list[TimetableSlot] = Field(default_factory=list)
    clashes: list[Clash] = Field(default_factory=list)
    skipped: list[SkippedSelection] = Field(default_factory=list)

    @property
    def all_slots(self) -> list[TimetableSlot]:
        return [*self.placed, *self.unplaced]


class SubjectConflictStats(BaseModel):
    total: int = 0
    conflicting: int = 0
    non_conflicting: int = 0
