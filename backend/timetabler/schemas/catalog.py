from __future__ import annotations

from pydantic import BaseModel, Field

# Raw records handed over by a catalog implementation. They are validated
# only when converted into a TimetableSlot.


class SubjectInfo(BaseModel):
    id: str
    code: str
    name: str

    model_config = {"frozen": True, "from_attributes": True}


class ScheduledSession(BaseModel):
    id: str
    subject_id: str
    kind: str = Field(alias="type")
    day_of_week: int
    start_time: str
    end_time: str
    venue: str | None = None
    instructor: str | None = None

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "from_attributes": True,
    }


class TutorialGroupRecord(BaseModel):
    id: str
    subject_id: str
    group_name: str
    day_of_week: int
    start_time: str
    end_time: str
    venue: str | None = None
    instructor: str | None = None

    model_config = {"frozen": True, "from_attributes": True}
