"""Tests for the day completion engine (F2)."""

import sqlite3
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch

from coursetrack.core.badges import DAY_COMPLETE
from coursetrack.core.completion_engine import complete_day
from coursetrack.core.results import FailureReason
from coursetrack.core.course_definition import missing_sections
from coursetrack.core.progress_engine import update_section_progress
from coursetrack.db import badges_repository, progress_repository
from coursetrack.db.database import get_db


class TestCompleteDay:
    """Tests for complete_day."""

    def test_all_sections_done(self, complete_sections):
        complete_sections("u1", 1)

        result = complete_day("u1", 1)

        assert result.success is True
        assert result.progress.is_completed is True
        assert result.progress.completed_at is not None
        assert result.completed_count == result.total_count == 5

    def test_missing_quiz(self, complete_sections):
        """Four of five sections done: the quiz is reported missing."""
        complete_sections("u1", 1, skip=("day1-quiz",))

        result = complete_day("u1", 1)

        assert result.success is False
        assert result.reason is FailureReason.INCOMPLETE_SECTIONS
        assert result.missing_sections == ["day1-quiz"]
        assert result.completed_count == 4
        assert result.total_count == 5
        assert result.details == {
            "missing_sections": ["day1-quiz"],
            "completed_sections": 4,
            "total_sections": 5,
        }
        assert progress_repository.get_progress("u1", 1).is_completed is False

    def test_missing_sections_in_course_order(self):
        progress_repository.update_section("u1", 2, "day2-quiz", True)
        progress_repository.update_section("u1", 2, "day2-intro", True)

        result = complete_day("u1", 2)

        assert result.missing_sections == [
            "day2-generative",
            "day2-video",
            "day2-activity",
        ]
        assert result.completed_count == 2

    def test_no_progress_record(self):
        result = complete_day("u1", 3)

        assert result.success is False
        assert result.reason is FailureReason.NO_PROGRESS_RECORD
        assert result.message == (
            "No progress found for this day. Please complete some sections first."
        )

    def test_invalid_day(self):
        result = complete_day("u1", 6)
        assert result.reason is FailureReason.INVALID_DAY
        assert result.details == {"valid_days": [1, 2, 3, 4, 5]}

    def test_extra_sections_do_not_matter(self, complete_sections):
        complete_sections("u1", 1)
        progress_repository.update_slide("u1", 1, "slide-3", True)
        progress_repository.record_quiz_score("u1", 1, "bonus", 10, mark_section=False)

        assert complete_day("u1", 1).success is True

    def test_awards_day_badge_once(self, complete_sections):
        complete_sections("u1", 4)

        first = complete_day("u1", 4)
        second = complete_day("u1", 4)

        assert first.badge is not None
        assert first.badge.badge_type == DAY_COMPLETE
        assert first.badge.day_id == 4
        assert first.badge.badge_data["title"] == "Day 4 Complete"
        assert second.success is True
        assert second.badge is None
        assert len(badges_repository.get_badges("u1")) == 1

    def test_badge_per_day(self, complete_sections):
        for day_id in (1, 2):
            complete_sections("u1", day_id)
            complete_day("u1", day_id)

        days = sorted(b.day_id for b in badges_repository.get_badges("u1"))
        assert days == [1, 2]

    def test_recompletion_keeps_first_timestamp(self, complete_sections):
        complete_sections("u1", 1)
        first = complete_day("u1", 1)
        second = complete_day("u1", 1)
        assert second.progress.completed_at == first.progress.completed_at

    def test_badge_failure_does_not_fail_completion(self, complete_sections):
        complete_sections("u1", 5)

        with patch(
            "coursetrack.core.badges.insert_badge",
            side_effect=sqlite3.OperationalError("disk I/O error"),
        ):
            result = complete_day("u1", 5)

        assert result.success is True
        assert result.badge is None
        assert result.progress.is_completed is True
        assert badges_repository.get_badges("u1") == []

    def test_legacy_flag_over_missing_sections(self):
        """complete_day reports the gap and clears a flag set without it."""
        progress_repository.update_section("u1", 3, "day3-intro", True)
        with get_db() as conn:
            conn.execute(
                "UPDATE user_progress SET is_completed = 1 WHERE user_id = ? AND day_id = ?",
                ("u1", 3),
            )

        result = complete_day("u1", 3)

        assert result.reason is FailureReason.INCOMPLETE_SECTIONS
        assert result.progress.is_completed is False
        assert progress_repository.get_progress("u1", 3).is_completed is False


class TestCompletionRace:
    """Completion racing with a section removal on the same day."""

    def test_flag_never_set_over_missing_section(self, complete_sections):
        for _ in range(10):
            complete_sections("u1", 1)

            with ThreadPoolExecutor(max_workers=2) as pool:
                completing = pool.submit(complete_day, "u1", 1)
                removing = pool.submit(
                    update_section_progress, "u1", 1, "day1-quiz", False
                )
                completing.result()
                removing.result()

            stored = progress_repository.get_progress("u1", 1)
            assert "day1-quiz" not in stored.completed_sections
            assert stored.is_completed is False
            assert missing_sections(1, stored.completed_sections) == ["day1-quiz"]
