"""Tests for quiz submission (F2)."""

import pytest

from coursetrack.config.app_config import clear_config_cache
from coursetrack.core.badges import QUIZ_MASTER
from coursetrack.core.progress_engine import submit_quiz_score
from coursetrack.core.results import FailureReason
from coursetrack.db import badges_repository


class TestSubmitQuiz:
    """Tests for submit_quiz_score."""

    def test_listed_quiz_completes_section(self):
        result = submit_quiz_score("u1", 1, "day1-quiz", 85)

        assert result.success is True
        assert result.counted_as_section is True
        assert "day1-quiz" in result.progress.completed_sections
        assert result.progress.quiz_scores == {"day1-quiz": 85}
        assert result.warnings == []

    def test_high_score_awards_quiz_master(self):
        result = submit_quiz_score("u1", 1, "day1-quiz", 85)

        assert result.badge is not None
        assert result.badge.badge_type == QUIZ_MASTER
        assert result.badge.badge_data["title"] == "Quiz Master"

    def test_quiz_master_awarded_once(self):
        """Repeated high scores on any day never add a second badge."""
        submit_quiz_score("u1", 1, "day1-quiz", 90)
        second = submit_quiz_score("u1", 2, "day2-quiz", 95)
        third = submit_quiz_score("u1", 1, "day1-quiz", 100)

        assert second.badge is None
        assert third.badge is None
        badges = badges_repository.get_badges("u1")
        assert [b.badge_type for b in badges] == [QUIZ_MASTER]

    @pytest.mark.parametrize("score,awarded", [(69, False), (70, True), (100, True), (0, False)])
    def test_threshold_boundary(self, score, awarded):
        result = submit_quiz_score("u1", 3, "day3-quiz", score)
        assert (result.badge is not None) is awarded

    def test_threshold_from_config(self, tmp_path):
        config_file = tmp_path / "data" / "config" / "app_config_v1.yaml"
        config_file.parent.mkdir(parents=True, exist_ok=True)
        config_file.write_text("course:\n  quiz_master_threshold: 90\n")
        clear_config_cache()

        assert submit_quiz_score("u1", 1, "day1-quiz", 85).badge is None
        assert submit_quiz_score("u1", 1, "day1-quiz", 90).badge is not None

    def test_score_overwrites_previous(self):
        submit_quiz_score("u1", 1, "day1-quiz", 40)
        result = submit_quiz_score("u1", 1, "day1-quiz", 60)
        assert result.progress.quiz_scores == {"day1-quiz": 60}

    def test_unlisted_quiz_keeps_score_with_warning(self):
        result = submit_quiz_score("u1", 2, "bonus-quiz", 50)

        assert result.success is True
        assert result.counted_as_section is False
        assert result.progress.quiz_scores == {"bonus-quiz": 50}
        assert result.progress.completed_sections == []
        assert len(result.warnings) == 1
        assert "bonus-quiz" in result.warnings[0]

    def test_invalid_day(self):
        result = submit_quiz_score("u1", 9, "day1-quiz", 80)
        assert result.success is False
        assert result.reason is FailureReason.INVALID_DAY
        assert badges_repository.get_badges("u1") == []
