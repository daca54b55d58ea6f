"""Tests for badge creation and listing (F2)."""

import sqlite3
from unittest.mock import patch

from coursetrack.core.badges import (
    DAY_COMPLETE,
    QUIZ_MASTER,
    award_badge_once,
    create_badge,
    day_complete_badge_data,
    list_badges,
    quiz_master_badge_data,
)
from coursetrack.core.progress_engine import submit_quiz_score
from coursetrack.core.results import FailureReason
from coursetrack.db import badges_repository


class TestBadgeData:
    """Tests for badge display metadata."""

    def test_day_complete(self):
        assert day_complete_badge_data(3) == {
            "dayId": 3,
            "title": "Day 3 Complete",
            "description": "Completed all activities for Day 3",
            "iconName": "check-circle",
            "color": "green",
        }

    def test_quiz_master(self):
        data = quiz_master_badge_data()
        assert data["description"] == "Scored 70% or higher on a quiz"
        assert data["iconName"] == "brain"


class TestAwardBadgeOnce:
    """Tests for automatic awards."""

    def test_type_only_badge(self):
        assert award_badge_once("u1", QUIZ_MASTER, {}) is not None
        assert award_badge_once("u1", QUIZ_MASTER, {}) is None

    def test_per_day_badge(self):
        assert award_badge_once("u1", DAY_COMPLETE, {}, day_id=1) is not None
        assert award_badge_once("u1", DAY_COMPLETE, {}, day_id=2) is not None
        assert award_badge_once("u1", DAY_COMPLETE, {}, day_id=1) is None
        assert len(list_badges("u1").badges) == 2

    def test_day_ignored_for_type_only_badge(self):
        assert award_badge_once("u1", QUIZ_MASTER, {}, day_id=2) is not None
        assert award_badge_once("u1", QUIZ_MASTER, {}) is None

        badges = list_badges("u1").badges
        assert [(b.badge_type, b.day_id) for b in badges] == [(QUIZ_MASTER, None)]


class TestCreateBadge:
    """Tests for explicit badge creation."""

    def test_creates(self):
        result = create_badge("u1", "early_bird", {"title": "Early Bird"})

        assert result.success is True
        assert result.created is True
        assert result.badge.badge_data == {"title": "Early Bird"}

    def test_repeat_returns_existing(self):
        first = create_badge("u1", "early_bird", {})
        second = create_badge("u1", "early_bird", {"title": "changed"})

        assert second.success is True
        assert second.created is False
        assert second.badge.id == first.badge.id
        assert len(list_badges("u1").badges) == 1

    def test_blank_type(self):
        result = create_badge("u1", "   ", {})
        assert result.reason is FailureReason.INVALID_BADGE

    def test_per_day_type_needs_day(self):
        result = create_badge("u1", DAY_COMPLETE, {})
        assert result.reason is FailureReason.INVALID_BADGE

    def test_invalid_day(self):
        result = create_badge("u1", DAY_COMPLETE, {}, day_id=8)
        assert result.reason is FailureReason.INVALID_DAY

    def test_users_are_separate(self):
        create_badge("u1", "early_bird", {})
        assert create_badge("u2", "early_bird", {}).created is True

    def test_day_rejected_for_type_only_badge(self):
        """quiz_master can't be keyed by day, so it stays unique per user."""
        result = create_badge("u1", QUIZ_MASTER, {}, day_id=2)

        assert result.success is False
        assert result.reason is FailureReason.INVALID_BADGE
        assert badges_repository.get_badges("u1") == []

    def test_quiz_master_held_once_across_paths(self):
        first = create_badge("u1", QUIZ_MASTER, {})
        create_badge("u1", QUIZ_MASTER, {}, day_id=2)
        again = create_badge("u1", QUIZ_MASTER, {})
        quiz = submit_quiz_score("u1", 1, "day1-quiz", 90)

        assert first.created is True
        assert again.created is False
        assert quiz.badge is None
        badges = badges_repository.get_badges("u1")
        assert [(b.badge_type, b.day_id) for b in badges] == [(QUIZ_MASTER, None)]


class TestListBadges:
    """Tests for list_badges."""

    def test_empty(self):
        result = list_badges("u1")
        assert result.success is True
        assert result.badges == []

    def test_store_failure(self):
        with patch(
            "coursetrack.core.badges.get_badges",
            side_effect=sqlite3.OperationalError("database is locked"),
        ):
            result = list_badges("u1")

        assert result.success is False
        assert result.reason is FailureReason.STORE_FAILURE
