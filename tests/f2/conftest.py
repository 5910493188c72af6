"""Fixtures for F2 tests - HTTP API.

Every test gets its own throwaway database and an app whose auth
middleware reports whatever user the `user` fixture holds.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from puzzlehost.db.data_access import testing_start
from puzzlehost.web.auth import UserHolder, static_user
from puzzlehost.web.server import setup_server

ORIGINAL_USER = "123344567"


@pytest.fixture
def user() -> UserHolder:
    """Current user; set user.id to switch users or None to log out."""
    return UserHolder(id=ORIGINAL_USER)


@pytest.fixture
def data_access():
    data_access, teardown = testing_start()
    yield data_access
    teardown()


@pytest.fixture
def client(user, data_access):
    """Test client for an app wired to the test database."""
    app = FastAPI()
    setup_server(app, static_user(user), data_access)
    return TestClient(app)


@pytest.fixture
def create_puzzle(client):
    """POST a puzzle as JSON and return its id."""

    def _create(name="my first puzzle") -> str:
        response = client.post("/api/puzzle", json={"name": name})
        assert response.status_code == 201
        return response.text

    return _create


@pytest.fixture
def create_answer(client):
    """POST an answer as JSON and return its id."""

    def _create(puzzle_id, value, answer_index) -> str:
        response = client.post(
            "/api/puzzleAnswer",
            json={"puzzle": puzzle_id, "value": value, "answerIndex": answer_index},
        )
        assert response.status_code == 201
        return response.text

    return _create


@pytest.fixture
def values_by_index(client):
    """Map answerIndex -> value for every answer of a puzzle."""

    def _values(puzzle_id) -> dict[int, str]:
        response = client.get("/api/puzzleAnswer/", params={"puzzle": puzzle_id})
        assert response.status_code == 200
        return {a["answerIndex"]: a["value"] for a in response.json()}

    return _values
