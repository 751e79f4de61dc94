from __future__ import annotations

import uuid
from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator

from timetabler.services.time_utils import duration_minutes, validate_time


class SlotKind(str, Enum):
    lecture = "lecture"
    tutorial = "tutorial"
    lab = "lab"
    practical = "practical"
    custom = "custom"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @property
    def default_color(self) -> str:
        return SLOT_KIND_COLORS[self]

    @property
    def default_duration_minutes(self) -> int:
        return 90 if self is SlotKind.lecture else 60


SLOT_KIND_COLORS: dict[SlotKind, str] = {
    SlotKind.lecture: "#8B5CF6",
    SlotKind.tutorial: "#A855F7",
    SlotKind.lab: "#9333EA",
    SlotKind.practical: "#7C3AED",
    SlotKind.custom: "#6D28D9",
}

# Kinds a stored class session may carry; custom entries never come from the catalog.
SESSION_KINDS = frozenset({SlotKind.lecture, SlotKind.tutorial, SlotKind.lab, SlotKind.practical})


def _check_time_order(start_time: str, end_time: str) -> None:
    # duration_minutes raises when end <= start; pydantic reports it as a value error.
    duration_minutes(start_time, end_time)


class TimetableSlot(BaseModel):
    """A single scheduled occurrence on the weekly grid.

    Serialises to the plain record shape used by persistence collaborators
    with ``model_dump(by_alias=True)`` (``type`` and ``isCustom`` keys).
    """

    id: str = Field(min_length=1, max_length=64)
    subject_id: str = Field(default="", max_length=64)
    subject_code: str = Field(default="", max_length=50)
    subject_name: str = Field(default="", max_length=200)
    kind: SlotKind = Field(alias="type")
    day_of_week: int = Field(ge=0, le=6)
    start_time: str
    end_time: str
    venue: str = Field(default="", max_length=200)
    instructor: str | None = Field(default=None, max_length=200)
    color: str | None = None
    is_custom: bool = Field(default=False, alias="isCustom")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "from_attributes": True,
    }

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time_format(cls, value: str) -> str:
        return validate_time(value)

    @field_validator("venue", mode="before")
    @classmethod
    def normalize_venue(cls, value: str | None) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @model_validator(mode="after")
    def validate_time_order(self) -> "TimetableSlot":
        _check_time_order(self.start_time, self.end_time)
        return self

    @property
    def duration_minutes(self) -> int:
        return duration_minutes(self.start_time, self.end_time)

    @property
    def display_color(self) -> str:
        return self.color or self.kind.default_color

    @property
    def label(self) -> str:
        if self.subject_code:
            return self.subject_code
        return self.subject_name or self.kind.display_name

    def to_record(self) -> dict:
        return self.model_dump(by_alias=True)

    @classmethod
    def from_record(cls, record: dict) -> "TimetableSlot":
        return cls.model_validate(record)


class CustomSlot(BaseModel):
    """A user-authored entry that is not tied to any subject."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), min_length=1, max_length=64)
    title: str = Field(min_length=1, max_length=200)
    day_of_week: int = Field(ge=0, le=6)
    start_time: str
    end_time: str
    venue: str | None = Field(default=None, max_length=200)
    description: str | None = Field(default=None, max_length=1000)
    color: str | None = None

    model_config = {
        "frozen": True,
        "from_attributes": True,
    }

    @field_validator("title")
    @classmethod
    def normalize_title(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("Title must not be blank")
        return stripped

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time_format(cls, value: str) -> str:
        return validate_time(value)

    @model_validator(mode="after")
    def validate_time_order(self) -> "CustomSlot":
        _check_time_order(self.start_time, self.end_time)
        return self


class SelectedSubject(BaseModel):
    subject_id: str = Field(min_length=1, max_length=64)
    tutorial_group_id: str | None = Field(default=None, min_length=1, max_length=64)

    model_config = {"frozen": True}
