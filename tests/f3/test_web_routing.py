"""Tests for route wiring and store error mapping (F3)."""

import inspect
import sqlite3
from unittest.mock import patch

import pytest
from fastapi.routing import APIRoute

from coursetrack.web.api import create_app

STORE_ROUTES = [
    "/api/progress",
    "/api/progress/{day_id}",
    "/api/progress/{day_id}/sections",
    "/api/progress/{day_id}/slides",
    "/api/progress/{day_id}/complete",
    "/api/quiz/{quiz_id}/submit",
    "/api/badges",
    "/api/certificates",
    "/api/profile",
]


class TestStoreRoutes:
    """Handlers doing blocking SQLite work run in the threadpool."""

    def test_store_handlers_are_sync(self):
        routes = [
            r
            for r in create_app().routes
            if isinstance(r, APIRoute) and r.path in STORE_ROUTES
        ]

        assert {r.path for r in routes} == set(STORE_ROUTES)
        for route in routes:
            assert not inspect.iscoroutinefunction(route.endpoint), route.path


class TestListStoreFailures:
    """List endpoints report store failures as tagged 500s."""

    @pytest.mark.parametrize(
        "path,target",
        [
            ("/api/progress", "coursetrack.db.progress_repository.get_all_progress"),
            ("/api/badges", "coursetrack.core.badges.get_badges"),
            ("/api/certificates", "coursetrack.db.certificates_repository.get_certificates"),
        ],
    )
    def test_store_failure(self, client, path, target):
        with patch(target, side_effect=sqlite3.OperationalError("database is locked")):
            response = client.get(path)

        assert response.status_code == 500
        assert response.json()["detail"] == {
            "reason": "store_failure",
            "message": "database is locked",
        }
