"""Fixtures for F3 tests - identity gateway, Web API and CLI."""

import pytest
from fastapi.testclient import TestClient

from coursetrack.auth.identity import AuthenticatedUser
from coursetrack.core.course_definition import get_section_ids
from coursetrack.db import users_repository
from coursetrack.web.api import create_app
from coursetrack.web.dependencies import get_current_user


@pytest.fixture
def current_user() -> AuthenticatedUser:
    return AuthenticatedUser(
        id="user-1",
        email="ana@example.com",
        metadata={"first_name": "Ana", "last_name": "Lima"},
    )


@pytest.fixture
def app(current_user):
    """App with identity resolved to current_user."""
    app = create_app()

    async def _fake_current_user() -> AuthenticatedUser:
        users_repository.ensure_user(
            current_user.id,
            email=current_user.email,
            first_name=current_user.first_name,
            last_name=current_user.last_name,
        )
        return current_user

    app.dependency_overrides[get_current_user] = _fake_current_user
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def complete_day_via_api(client):
    """Complete every section of a day and then the day itself."""

    def _complete(day_id: int):
        for section_id in get_section_ids(day_id):
            client.post(f"/api/progress/{day_id}/sections", json={"section_id": section_id})
        return client.post(f"/api/progress/{day_id}/complete")

    return _complete
