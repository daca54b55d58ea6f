"""Tests for the users repository (F1)."""

import pytest

from coursetrack.db import users_repository


class TestEnsureUser:
    """Tests for lazy user creation."""

    def test_creates_user(self):
        user = users_repository.ensure_user("u1", email="a@example.com", first_name="Ana")
        assert user.id == "u1"
        assert user.email == "a@example.com"
        assert user.first_name == "Ana"
        assert user.profile_locked is False

    def test_existing_user_untouched(self):
        users_repository.ensure_user("u1", email="a@example.com")
        user = users_repository.ensure_user("u1", email="other@example.com")
        assert user.email == "a@example.com"

    def test_get_missing(self):
        assert users_repository.get_user("nobody") is None


class TestUpdateProfile:
    """Tests for profile updates."""

    def test_update_fields(self):
        users_repository.ensure_user("u1")
        user = users_repository.update_user_profile(
            "u1", {"full_name": "Ana García", "profile_locked": True}
        )
        assert user.full_name == "Ana García"
        assert user.profile_locked is True

    def test_unknown_field_rejected(self):
        users_repository.ensure_user("u1")
        with pytest.raises(ValueError, match="Unknown profile fields"):
            users_repository.update_user_profile("u1", {"id": "hijack"})

    def test_missing_user_rejected(self):
        with pytest.raises(ValueError, match="not found"):
            users_repository.update_user_profile("nobody", {"phone": "1"})
