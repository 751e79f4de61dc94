import pytest
from pydantic import ValidationError

from timetabler.core.config import Settings
from timetabler.core.exceptions import (
    AppError,
    CatalogUnavailableError,
    LookupFailure,
    ResourceNotFoundError,
    TimetableAssemblyError,
    TimetableValidationError,
)


def test_settings_defaults(monkeypatch):
    for name in ("CLASH_ERROR_THRESHOLD_MINUTES", "EXEMPT_SAME_SUBJECT_SESSIONS", "MAX_FETCH_WORKERS"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.project_name == "Timetabler"
    assert settings.clash_error_threshold_minutes == 30
    assert settings.exempt_same_subject_sessions is True
    assert settings.max_fetch_workers == 4


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("CLASH_ERROR_THRESHOLD_MINUTES", "45")
    monkeypatch.setenv("EXEMPT_SAME_SUBJECT_SESSIONS", "false")

    settings = Settings(_env_file=None)

    assert settings.clash_error_threshold_minutes == 45
    assert settings.exempt_same_subject_sessions is False


@pytest.mark.parametrize("field, value", [("clash_error_threshold_minutes", 0), ("max_fetch_workers", 0)])
def test_settings_reject_out_of_range_values(field, value):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **{field: value})


def test_error_hierarchy():
    not_found = ResourceNotFoundError("Subject", "subj-1")

    assert isinstance(not_found, LookupFailure)
    assert isinstance(not_found, AppError)
    assert not_found.message == "Subject with id subj-1 not found"
    assert not_found.details == {"resource_type": "Subject", "resource_id": "subj-1"}
    assert str(not_found) == not_found.message

    assert issubclass(CatalogUnavailableError, LookupFailure)
    assert issubclass(TimetableValidationError, ValueError)
    assert not issubclass(TimetableAssemblyError, LookupFailure)
    assert TimetableAssemblyError("nothing assembled").details == {}
