"""Fixtures for F1 tests - data layer."""

import pytest

from puzzlehost.db.data_access import DataAccess, testing_start

OWNER = "123344567"


@pytest.fixture
def data_access() -> DataAccess:
    """Isolated database, removed after the test."""
    data_access, teardown = testing_start()
    yield data_access
    teardown()


@pytest.fixture
def puzzle(data_access):
    """A puzzle owned by OWNER with no answers."""
    return data_access.puzzles.create("my first puzzle", OWNER)


@pytest.fixture
def answered_puzzle(data_access, puzzle):
    """A puzzle with answers "0", "10", "100" at indexes 0, 1, 2.

    Returns:
        (puzzle, [answer0, answer1, answer2])
    """
    answers = [
        data_access.answers.create(puzzle.id, value, index)
        for index, value in enumerate(["0", "10", "100"])
    ]
    return puzzle, answers
