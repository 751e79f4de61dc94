from timetabler.schemas.clash import Clash, ClashResolution, ResolutionOption  # noqa: F401
from timetabler.schemas.generation import AssemblyResult, FilteredTimetable, SkippedSelection  # noqa: F401
from timetabler.schemas.timetable import CustomSlot, SelectedSubject, SlotKind, TimetableSlot  # noqa: F401
from timetabler.services.assembler import (  # noqa: F401
    TimetableAssembler,
    conflicting_subject_codes,
    merge_custom,
    non_conflicting,
)
from timetabler.services.clash_detection import ClashPolicy, find_all_clashes, find_clashes_for_new_slot  # noqa: F401
from timetabler.services.resolution import suggest_resolutions  # noqa: F401
from timetabler.services.working_timetable import WorkingTimetable  # noqa: F401
