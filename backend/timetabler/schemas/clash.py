from pydantic import BaseModel, Field
from typing import Literal, Optional, List

from timetabler.schemas.timetable import TimetableSlot

ClashCategory = Literal["time", "venue"]
ClashSeverity = Literal["error", "warning"]


class Clash(BaseModel):
    id: str
    slot_a: TimetableSlot
    slot_b: TimetableSlot
    category: ClashCategory
    severity: ClashSeverity
    overlap_minutes: int = Field(ge=1)
    message: str

    model_config = {"frozen": True}

    @property
    def slot_ids(self) -> tuple[str, str]:
        return self.slot_a.id, self.slot_b.id

    def involves(self, slot_id: str) -> bool:
        return slot_id in self.slot_ids


class ResolutionOption(BaseModel):
    action: Literal["remove", "ignore"]
    description: str
    slot_id: Optional[str] = None  # set for "remove" only

    model_config = {"frozen": True}


class ClashResolution(BaseModel):
    clash_id: str
    options: List[ResolutionOption]
