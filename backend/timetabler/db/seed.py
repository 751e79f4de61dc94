"""Sample subject catalog used for local development and tests."""

from __future__ import annotations

from datetime import time

from sqlalchemy import select
from sqlalchemy.orm import Session

from timetabler.models.class_schedule import ClassSchedule, SessionType
from timetabler.models.subject import Subject
from timetabler.models.tutorial_group import TutorialGroup

SAMPLE_SEMESTER = "Fall 2024"

SAMPLE_SUBJECTS = [
    {"code": "CS101", "name": "Introduction to Programming", "credits": 3, "department": "Computer Science",
     "description": "Fundamentals of programming using Python"},
    {"code": "MATH201", "name": "Calculus I", "credits": 4, "department": "Mathematics",
     "description": "Limits, derivatives, and integrals of algebraic and transcendental functions"},
    {"code": "ENG105", "name": "Academic Writing", "credits": 3, "department": "English",
     "description": "Principles of academic writing and research"},
    {"code": "PHYS101", "name": "Introduction to Physics", "credits": 4, "department": "Physics",
     "description": "Basic principles of mechanics, thermodynamics, and waves"},
    {"code": "CHEM110", "name": "General Chemistry", "credits": 4, "department": "Chemistry",
     "description": "Fundamental principles of chemistry"},
    {"code": "BUS200", "name": "Business Management", "credits": 3, "department": "Business",
     "description": "Introduction to business management principles"},
]

# (subject code, type, day_of_week, start, end, venue, instructor); day 0 = Sunday
SAMPLE_SCHEDULES = [
    ("CS101", SessionType.lecture, 1, "09:00", "10:30", "Room A101", "Dr. Smith"),
    ("CS101", SessionType.lecture, 3, "09:00", "10:30", "Room A101", "Dr. Smith"),
    ("CS101", SessionType.lab, 5, "14:00", "16:00", "Computer Lab 1", "Dr. Johnson"),
    ("MATH201", SessionType.lecture, 2, "11:00", "12:30", "Room B201", "Prof. Williams"),
    ("MATH201", SessionType.lecture, 4, "11:00", "12:30", "Room B201", "Prof. Williams"),
    ("MATH201", SessionType.tutorial, 5, "10:00", "11:00", "Room B205", "Prof. Williams"),
    ("ENG105", SessionType.lecture, 1, "14:00", "15:30", "Room C301", "Dr. Brown"),
    ("ENG105", SessionType.lecture, 4, "14:00", "15:30", "Room C301", "Dr. Brown"),
    ("PHYS101", SessionType.lecture, 1, "10:00", "11:30", "Room D110", "Dr. Curie"),
    ("PHYS101", SessionType.practical, 3, "13:00", "15:00", "Physics Lab", "Dr. Curie"),
]

# (subject code, group name, day_of_week, start, end, venue, instructor)
SAMPLE_TUTORIAL_GROUPS = [
    ("CS101", "Tutorial Group A", 2, "13:00", "14:00", "Room A105", "Dr. Johnson"),
    ("CS101", "Tutorial Group B", 2, "14:00", "15:00", "Room A105", "Dr. Johnson"),
    ("CS101", "Tutorial Group C", 4, "13:00", "14:00", "Room A105", "Ms. Davis"),
    ("MATH201", "Tutorial Group A", 3, "14:00", "15:00", "Room B202", "Mr. Wilson"),
    ("MATH201", "Tutorial Group B", 3, "15:00", "16:00", "Room B202", "Mr. Wilson"),
    ("ENG105", "Tutorial Group A", 2, "16:00", "17:00", "Room C305", "Ms. Taylor"),
    ("ENG105", "Tutorial Group B", 5, "11:00", "12:00", "Room C305", "Ms. Taylor"),
]


def parse_clock(value: str) -> time:
    hours, minutes = value.split(":")
    return time(int(hours), int(minutes))


def upsert_subjects(session: Session) -> dict[str, Subject]:
    existing = {subject.code: subject for subject in session.execute(select(Subject)).scalars()}
    for item in SAMPLE_SUBJECTS:
        subject = existing.get(item["code"])
        if subject is None:
            subject = Subject(code=item["code"])
            session.add(subject)
            existing[item["code"]] = subject
        subject.name = item["name"]
        subject.credits = item["credits"]
        subject.department = item["department"]
        subject.description = item["description"]
        subject.semester = SAMPLE_SEMESTER
    session.flush()
    return existing


def seed_catalog(session: Session) -> dict[str, Subject]:
    """Insert the sample subjects with their schedules and tutorial groups.

    Subjects are upserted by code; schedules and tutorial groups are only
    added for subjects that have none yet. The caller commits.
    """
    subjects = upsert_subjects(session)

    scheduled_ids = set(session.execute(select(ClassSchedule.subject_id)).scalars())
    for code, session_type, day, start, end, venue, instructor in SAMPLE_SCHEDULES:
        subject = subjects[code]
        if subject.id in scheduled_ids:
            continue
        session.add(
            ClassSchedule(
                subject_id=subject.id,
                type=session_type,
                day_of_week=day,
                start_time=parse_clock(start),
                end_time=parse_clock(end),
                venue=venue,
                instructor=instructor,
            )
        )

    tutored_ids = set(session.execute(select(TutorialGroup.subject_id)).scalars())
    for code, group_name, day, start, end, venue, instructor in SAMPLE_TUTORIAL_GROUPS:
        subject = subjects[code]
        if subject.id in tutored_ids:
            continue
        session.add(
            TutorialGroup(
                subject_id=subject.id,
                group_name=group_name,
                day_of_week=day,
                start_time=parse_clock(start),
                end_time=parse_clock(end),
                venue=venue,
                instructor=instructor,
            )
        )

    session.flush()
    return subjects
