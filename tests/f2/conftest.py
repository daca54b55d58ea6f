"""Fixtures for F2 tests - business-rule engines."""

import pytest

from coursetrack.core.course_definition import get_section_ids
from coursetrack.db import progress_repository


@pytest.fixture
def complete_sections():
    """Mark every section of a day completed through the store."""

    def _complete(user_id: str, day_id: int, skip: tuple[str, ...] = ()) -> None:
        for section_id in get_section_ids(day_id):
            if section_id not in skip:
                progress_repository.update_section(user_id, day_id, section_id, True)

    return _complete


@pytest.fixture
def finished_course(complete_sections):
    """A user with all five days completed and flagged."""

    def _finish(user_id: str) -> None:
        for day_id in range(1, 6):
            complete_sections(user_id, day_id)
            progress_repository.mark_completed(user_id, day_id)

    return _finish
