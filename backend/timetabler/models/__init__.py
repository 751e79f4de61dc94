from timetabler.models.class_schedule import ClassSchedule, SessionType  # noqa: F401
from timetabler.models.subject import Subject  # noqa: F401
from timetabler.models.tutorial_group import TutorialGroup  # noqa: F401
