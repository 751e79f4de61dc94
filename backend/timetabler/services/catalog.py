from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from datetime import time
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from timetabler.core.exceptions import CatalogUnavailableError, ResourceNotFoundError
from timetabler.models.class_schedule import ClassSchedule
from timetabler.models.subject import Subject
from timetabler.models.tutorial_group import TutorialGroup
from timetabler.schemas.catalog import ScheduledSession, SubjectInfo, TutorialGroupRecord

logger = logging.getLogger(__name__)


class SessionCatalog(Protocol):
    """Read-only lookups the assembler needs from the subject store.

    Implementations raise ``ResourceNotFoundError`` for unknown ids and
    ``CatalogUnavailableError`` when the store cannot answer. A subject with
    no sessions returns an empty list.
    """

    def get_subject(self, subject_id: str) -> SubjectInfo: ...

    def list_sessions(self, subject_id: str) -> list[ScheduledSession]: ...

    def get_tutorial(self, tutorial_group_id: str) -> TutorialGroupRecord: ...


class InMemorySessionCatalog:
    def __init__(
        self,
        subjects: Iterable[SubjectInfo] = (),
        sessions: Iterable[ScheduledSession] = (),
        tutorials: Iterable[TutorialGroupRecord] = (),
    ) -> None:
        self._subjects: dict[str, SubjectInfo] = {subject.id: subject for subject in subjects}
        self._sessions: dict[str, list[ScheduledSession]] = {}
        for session in sessions:
            self._sessions.setdefault(session.subject_id, []).append(session)
        self._tutorials: dict[str, TutorialGroupRecord] = {tutorial.id: tutorial for tutorial in tutorials}

    def get_subject(self, subject_id: str) -> SubjectInfo:
        subject = self._subjects.get(subject_id)
        if subject is None:
            raise ResourceNotFoundError("Subject", subject_id)
        return subject

    def list_sessions(self, subject_id: str) -> list[ScheduledSession]:
        if subject_id not in self._subjects:
            raise ResourceNotFoundError("Subject", subject_id)
        return list(self._sessions.get(subject_id, []))

    def get_tutorial(self, tutorial_group_id: str) -> TutorialGroupRecord:
        tutorial = self._tutorials.get(tutorial_group_id)
        if tutorial is None:
            raise ResourceNotFoundError("Tutorial group", tutorial_group_id)
        return tutorial


def format_db_time(value: time | str) -> str:
    if isinstance(value, time):
        return value.strftime("%H:%M")
    return value


class SqlSessionCatalog:
    """SessionCatalog backed by the relational subject store.

    Each lookup opens its own short-lived session so lookups can run on
    separate threads.
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    @contextmanager
    def _session(self, operation: str, record_id: str) -> Iterator[Session]:
        try:
            with self._session_factory() as db:
                yield db
        except SQLAlchemyError as exc:
            logger.warning("Catalog %s failed for %s", operation, record_id, exc_info=True)
            raise CatalogUnavailableError(
                f"Catalog {operation} failed for {record_id}",
                details={"operation": operation, "record_id": record_id},
            ) from exc

    def get_subject(self, subject_id: str) -> SubjectInfo:
        with self._session("get_subject", subject_id) as db:
            subject = db.get(Subject, subject_id)
            if subject is None:
                raise ResourceNotFoundError("Subject", subject_id)
            return SubjectInfo(id=subject.id, code=subject.code, name=subject.name)

    def list_sessions(self, subject_id: str) -> list[ScheduledSession]:
        with self._session("list_sessions", subject_id) as db:
            if db.get(Subject, subject_id) is None:
                raise ResourceNotFoundError("Subject", subject_id)
            rows = db.execute(
                select(ClassSchedule)
                .where(ClassSchedule.subject_id == subject_id)
                .order_by(
                    ClassSchedule.day_of_week,
                    ClassSchedule.start_time,
                    ClassSchedule.end_time,
                    ClassSchedule.id,
                )
            ).scalars().all()
            return [
                ScheduledSession(
                    id=row.id,
                    subject_id=row.subject_id,
                    kind=row.type.value,
                    day_of_week=row.day_of_week,
                    start_time=format_db_time(row.start_time),
                    end_time=format_db_time(row.end_time),
                    venue=row.venue,
                    instructor=row.instructor,
                )
                for row in rows
            ]

    def get_tutorial(self, tutorial_group_id: str) -> TutorialGroupRecord:
        with self._session("get_tutorial", tutorial_group_id) as db:
            tutorial = db.get(TutorialGroup, tutorial_group_id)
            if tutorial is None:
                raise ResourceNotFoundError("Tutorial group", tutorial_group_id)
            return TutorialGroupRecord(
                id=tutorial.id,
                subject_id=tutorial.subject_id,
                group_name=tutorial.group_name,
                day_of_week=tutorial.day_of_week,
                start_time=format_db_time(tutorial.start_time),
                end_time=format_db_time(tutorial.end_time),
                venue=tutorial.venue,
                instructor=tutorial.instructor,
            )
