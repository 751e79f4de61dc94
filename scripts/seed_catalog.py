"""Seed the sample subject catalog for Timetabler.

Run:
  PYTHONPATH=backend python scripts/seed_catalog.py
"""

from __future__ import annotations

from sqlalchemy import func, select

from timetabler.db.seed import seed_catalog
from timetabler.db.session import SessionLocal
from timetabler.models.class_schedule import ClassSchedule
from timetabler.models.subject import Subject
from timetabler.models.tutorial_group import TutorialGroup


def main() -> None:
    with SessionLocal() as session:
        seed_catalog(session)
        session.commit()

        subject_count = session.execute(select(func.count(Subject.id))).scalar_one()
        schedule_count = session.execute(select(func.count(ClassSchedule.id))).scalar_one()
        tutorial_count = session.execute(select(func.count(TutorialGroup.id))).scalar_one()

    print("Subject catalog seeded successfully.")
    print("")
    print(f"Subjects: {subject_count}")
    print(f"Class schedules: {schedule_count}")
    print(f"Tutorial groups: {tutorial_count}")


if __name__ == "__main__":
    main()
