from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from timetabler.core.config import Settings, get_settings
from timetabler.core.exceptions import CatalogUnavailableError, LookupFailure, TimetableAssemblyError, TimetableValidationError
from timetabler.schemas.catalog import SubjectInfo
from timetabler.schemas.clash import Clash
from timetabler.schemas.generation import AssemblyResult, FilteredTimetable, SkippedSelection, SubjectConflictStats
from timetabler.schemas.timetable import CustomSlot, SelectedSubject, TimetableSlot
from timetabler.services.catalog import SessionCatalog
from timetabler.services.clash_detection import ClashPolicy, find_all_clashes, find_clashes_for_new_slot
from timetabler.services.slot_conversion import from_custom_entry, from_scheduled_session, from_tutorial_group

logger = logging.getLogger(__name__)


@dataclass
class SelectionOutcome:
    selection: SelectedSubject
    slots: list[TimetableSlot] = field(default_factory=list)
    skipped: list[SkippedSelection] = field(default_factory=list)
    subject_failed: bool = False
    catalog_unavailable: bool = False


class TimetableAssembler:
    """Builds a student's weekly slots from their selected subjects.

    Selections are resolved against ``catalog``; lookups for distinct
    selections may run concurrently, but results are always combined in
    selection order, and within a subject in catalog order followed by the
    chosen tutorial. That order is what greedy placement walks.
    """

    def __init__(
        self,
        catalog: SessionCatalog,
        *,
        policy: ClashPolicy | None = None,
        max_fetch_workers: int = 4,
    ) -> None:
        self.catalog = catalog
        self.policy = policy or ClashPolicy()
        self.max_fetch_workers = max(1, max_fetch_workers)

    @classmethod
    def from_settings(cls, catalog: SessionCatalog, settings: Settings | None = None) -> "TimetableAssembler":
        settings = settings or get_settings()
        return cls(
            catalog,
            policy=ClashPolicy.from_settings(settings),
            max_fetch_workers=settings.max_fetch_workers,
        )

    def assemble(self, selected_subjects: Sequence[SelectedSubject]) -> AssemblyResult:
        if not selected_subjects:
            return AssemblyResult()

        selections: list[SelectedSubject] = []
        duplicates: list[SkippedSelection] = []
        seen: set[str] = set()
        for selection in selected_subjects:
            if selection.subject_id in seen:
                logger.warning("Ignoring duplicate selection of subject %s", selection.subject_id)
                duplicates.append(
                    SkippedSelection(
                        subject_id=selection.subject_id,
                        tutorial_group_id=selection.tutorial_group_id,
                        reason="Subject selected more than once",
                    )
                )
                continue
            seen.add(selection.subject_id)
            selections.append(selection)

        outcomes = self._resolve_all(selections)
        if all(outcome.catalog_unavailable for outcome in outcomes):
            raise TimetableAssemblyError(
                "Subject catalog unavailable for every selected subject",
                details={"subject_ids": [selection.subject_id for selection in selections]},
            )

        slots = [slot for outcome in outcomes for slot in outcome.slots]
        skipped = [item for outcome in outcomes for item in outcome.skipped] + duplicates
        logger.info(
            "Generated %d timetable slot(s) from %d subject(s), %d skipped",
            len(slots),
            len(selections),
            sum(1 for outcome in outcomes if outcome.subject_failed),
        )
        return AssemblyResult(slots=slots, skipped=skipped)

    def generate(self, selected_subjects: Sequence[SelectedSubject]) -> list[TimetableSlot]:
        return self.assemble(selected_subjects).slots

    def generate_with_clash_filtering(self, selected_subjects: Sequence[SelectedSubject]) -> FilteredTimetable:
        result = self.assemble(selected_subjects)
        placed, unplaced = partition_by_clashes(result.slots, policy=self.policy)
        # Report clashes over the full candidate set, including unplaced-vs-unplaced pairs.
        clashes = find_all_clashes([*placed, *unplaced], policy=self.policy)
        logger.info("Placed %d slot(s), %d slot(s) awaiting placement", len(placed), len(unplaced))
        return FilteredTimetable(placed=placed, unplaced=unplaced, clashes=clashes, skipped=result.skipped)

    def generate_complete(
        self,
        selected_subjects: Sequence[SelectedSubject],
        custom_entries: Sequence[CustomSlot] = (),
    ) -> list[TimetableSlot]:
        return merge_custom(self.generate(selected_subjects), custom_entries)

    def _resolve_all(self, selections: list[SelectedSubject]) -> list[SelectionOutcome]:
        if self.max_fetch_workers == 1 or len(selections) <= 1:
            return [self._resolve_selection(selection) for selection in selections]
        workers = min(self.max_fetch_workers, len(selections))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="timetable-fetch") as executor:
            # map() yields in submission order regardless of completion order.
            return list(executor.map(self._resolve_selection, selections))

    def _resolve_selection(self, selection: SelectedSubject) -> SelectionOutcome:
        outcome = SelectionOutcome(selection=selection)
        subject_id = selection.subject_id
        try:
            subject = self.catalog.get_subject(subject_id)
            sessions = self.catalog.list_sessions(subject_id)
        except LookupFailure as exc:
            logger.warning("Skipping subject %s: %s", subject_id, exc.message)
            outcome.subject_failed = True
            outcome.catalog_unavailable = isinstance(exc, CatalogUnavailableError)
            outcome.skipped.append(
                SkippedSelection(
                    subject_id=subject_id,
                    tutorial_group_id=selection.tutorial_group_id,
                    reason=exc.message,
                )
            )
            return outcome

        logger.debug("Resolved subject %s with %d session(s)", subject.code, len(sessions))
        for session in sessions:
            try:
                outcome.slots.append(from_scheduled_session(session, subject.code, subject.name))
            except TimetableValidationError as exc:
                logger.warning("Skipping session %s of %s: %s", session.id, subject.code, exc.message)
                outcome.skipped.append(
                    SkippedSelection(subject_id=subject_id, reason=f"Session {session.id}: {exc.message}")
                )

        if selection.tutorial_group_id:
            tutorial_slot = self._resolve_tutorial(selection.tutorial_group_id, subject, outcome)
            if tutorial_slot is not None:
                outcome.slots.append(tutorial_slot)
        return outcome

    def _resolve_tutorial(
        self,
        tutorial_group_id: str,
        subject: SubjectInfo,
        outcome: SelectionOutcome,
    ) -> TimetableSlot | None:
        def skip(reason: str) -> None:
            logger.warning("Skipping tutorial %s of %s: %s", tutorial_group_id, subject.code, reason)
            outcome.skipped.append(
                SkippedSelection(subject_id=subject.id, tutorial_group_id=tutorial_group_id, reason=reason)
            )

        try:
            tutorial = self.catalog.get_tutorial(tutorial_group_id)
        except LookupFailure as exc:
            skip(exc.message)
            return None
        if tutorial.subject_id != subject.id:
            skip(f"Tutorial group belongs to subject {tutorial.subject_id}, not {subject.id}")
            return None
        try:
            return from_tutorial_group(tutorial, subject.code, subject.name)
        except TimetableValidationError as exc:
            skip(exc.message)
            return None


def partition_by_clashes(
    candidates: Sequence[TimetableSlot],
    *,
    policy: ClashPolicy | None = None,
) -> tuple[list[TimetableSlot], list[TimetableSlot]]:
    """Greedy first-seen-wins placement in candidate order.

    A candidate is placed when it clashes with nothing already placed;
    otherwise it is left unplaced. Placed slots are never evicted.
    """
    placed: list[TimetableSlot] = []
    unplaced: list[TimetableSlot] = []
    for slot in candidates:
        if find_clashes_for_new_slot(slot, placed, policy=policy):
            unplaced.append(slot)
        else:
            placed.append(slot)
    return placed, unplaced


def merge_custom(slots: Sequence[TimetableSlot], custom_entries: Sequence[CustomSlot]) -> list[TimetableSlot]:
    """Append converted custom entries; callers re-run clash detection afterwards."""
    return [*slots, *(from_custom_entry(entry) for entry in custom_entries)]


def conflicting_slot_ids(clashes: Sequence[Clash], unplaced: Sequence[TimetableSlot]) -> set[str]:
    slot_ids: set[str] = set()
    for clash in clashes:
        slot_ids.update(clash.slot_ids)
    slot_ids.update(slot.id for slot in unplaced)
    return slot_ids


def non_conflicting(
    all_slots: Sequence[TimetableSlot],
    clashes: Sequence[Clash],
    unplaced: Sequence[TimetableSlot],
) -> list[TimetableSlot]:
    excluded = conflicting_slot_ids(clashes, unplaced)
    return [slot for slot in all_slots if slot.id not in excluded]


def conflicting_subject_codes(clashes: Sequence[Clash], unplaced: Sequence[TimetableSlot]) -> set[str]:
    codes: set[str] = set()
    for clash in clashes:
        codes.add(clash.slot_a.subject_code)
        codes.add(clash.slot_b.subject_code)
    codes.update(slot.subject_code for slot in unplaced)
    # Custom entries carry no subject code.
    codes.discard("")
    return codes


def subject_conflict_stats(
    all_slots: Sequence[TimetableSlot],
    clashes: Sequence[Clash],
    unplaced: Sequence[TimetableSlot],
) -> dict[str, SubjectConflictStats]:
    excluded = conflicting_slot_ids(clashes, unplaced)
    stats: dict[str, SubjectConflictStats] = {}
    for slot in all_slots:
        if slot.is_custom:
            continue
        entry = stats.setdefault(slot.subject_code, SubjectConflictStats())
        entry.total += 1
        if slot.id in excluded:
            entry.conflicting += 1
        else:
            entry.non_conflicting += 1
    return stats
