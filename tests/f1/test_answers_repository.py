"""Tests for answer ordering in the answers repository (F1)."""

import threading

import pytest

from puzzlehost.db.answers_repository import InvalidAnswerIndexError


def _ordered(data_access, puzzle_id):
    """(value, answer_index) pairs in list order."""
    return [
        (a.value, a.answer_index)
        for a in data_access.answers.list_for_puzzle(puzzle_id)
    ]


class TestCreateAnswer:
    """Tests for AnswerRepository.create."""

    def test_create_first_answer(self, data_access, puzzle):
        """First answer lands at index 0."""
        answer = data_access.answers.create(puzzle.id, "5", 0)
        assert answer.id > 0
        assert answer.puzzle_id == puzzle.id
        assert answer.value == "5"
        assert answer.answer_index == 0

    def test_append_without_index(self, data_access, answered_puzzle):
        """None appends after the last answer."""
        puzzle, _ = answered_puzzle
        answer = data_access.answers.create(puzzle.id, "1000")
        assert answer.answer_index == 3

    def test_insert_at_front_shifts_others(self, data_access, answered_puzzle):
        """Inserting at 0 pushes every answer up by one."""
        puzzle, _ = answered_puzzle
        data_access.answers.create(puzzle.id, "first", 0)

        assert _ordered(data_access, puzzle.id) == [
            ("first", 0), ("0", 1), ("10", 2), ("100", 3),
        ]

    def test_insert_in_middle(self, data_access, answered_puzzle):
        """Inserting at 1 only shifts answers from 1 onwards."""
        puzzle, _ = answered_puzzle
        data_access.answers.create(puzzle.id, "5", 1)

        assert _ordered(data_access, puzzle.id) == [
            ("0", 0), ("5", 1), ("10", 2), ("100", 3),
        ]

    def test_index_past_end_is_clamped(self, data_access, answered_puzzle):
        """An index beyond the end becomes an append."""
        puzzle, _ = answered_puzzle
        answer = data_access.answers.create(puzzle.id, "last", 42)
        assert answer.answer_index == 3

    def test_negative_index_rejected(self, data_access, puzzle):
        """Negative indexes raise InvalidAnswerIndexError."""
        with pytest.raises(InvalidAnswerIndexError):
            data_access.answers.create(puzzle.id, "5", -1)

        assert data_access.answers.count_for_puzzle(puzzle.id) == 0

    def test_answers_of_other_puzzles_untouched(self, data_access, answered_puzzle):
        """Reordering one puzzle leaves other puzzles alone."""
        puzzle, _ = answered_puzzle
        other = data_access.puzzles.create("other", "someone")
        data_access.answers.create(other.id, "x", 0)

        data_access.answers.create(puzzle.id, "first", 0)

        assert _ordered(data_access, other.id) == [("x", 0)]


class TestGetAnswer:
    """Tests for AnswerRepository.get and list_for_puzzle."""

    def test_get_existing(self, data_access, answered_puzzle):
        """Get returns the stored answer."""
        _, answers = answered_puzzle
        assert data_access.answers.get(answers[1].id) == answers[1]

    def test_get_missing(self, data_access):
        """Get returns None for unknown ids."""
        assert data_access.answers.get(999) is None

    def test_list_empty(self, data_access, puzzle):
        """A puzzle without answers lists nothing."""
        assert data_access.answers.list_for_puzzle(puzzle.id) == []
        assert data_access.answers.count_for_puzzle(puzzle.id) == 0


class TestUpdateAnswer:
    """Tests for AnswerRepository.update."""

    def test_change_value_only(self, data_access, answered_puzzle):
        """Changing the value keeps the position."""
        puzzle, answers = answered_puzzle
        assert data_access.answers.update(answers[1].id, value="11") is True

        assert _ordered(data_access, puzzle.id) == [
            ("0", 0), ("11", 1), ("100", 2),
        ]

    def test_move_down(self, data_access, answered_puzzle):
        """Moving 0 -> 2 pulls the answers in between toward the front."""
        puzzle, answers = answered_puzzle
        data_access.answers.update(answers[0].id, answer_index=2)

        assert _ordered(data_access, puzzle.id) == [
            ("10", 0), ("100", 1), ("0", 2),
        ]

    def test_move_up(self, data_access, answered_puzzle):
        """Moving 2 -> 0 pushes the answers in between back."""
        puzzle, answers = answered_puzzle
        data_access.answers.update(answers[2].id, answer_index=0)

        assert _ordered(data_access, puzzle.id) == [
            ("100", 0), ("0", 1), ("10", 2),
        ]

    def test_move_to_same_index(self, data_access, answered_puzzle):
        """Moving to the current index changes nothing."""
        puzzle, answers = answered_puzzle
        data_access.answers.update(answers[1].id, answer_index=1)

        assert _ordered(data_access, puzzle.id) == [
            ("0", 0), ("10", 1), ("100", 2),
        ]

    def test_move_past_end_is_clamped(self, data_access, answered_puzzle):
        """Moving beyond the end moves to the last position."""
        puzzle, answers = answered_puzzle
        data_access.answers.update(answers[0].id, answer_index=10)

        assert _ordered(data_access, puzzle.id) == [
            ("10", 0), ("100", 1), ("0", 2),
        ]

    def test_value_and_move_together(self, data_access, answered_puzzle):
        """Value and index can change in one call."""
        puzzle, answers = answered_puzzle
        data_access.answers.update(answers[1].id, value="7", answer_index=0)

        assert _ordered(data_access, puzzle.id) == [
            ("7", 0), ("0", 1), ("100", 2),
        ]

    def test_update_missing(self, data_access):
        """Updating an unknown answer reports False."""
        assert data_access.answers.update(999, value="x") is False

    def test_negative_index_rejected(self, data_access, answered_puzzle):
        """Negative indexes raise and leave the order alone."""
        puzzle, answers = answered_puzzle
        with pytest.raises(InvalidAnswerIndexError):
            data_access.answers.update(answers[1].id, answer_index=-3)

        assert _ordered(data_access, puzzle.id) == [
            ("0", 0), ("10", 1), ("100", 2),
        ]


class TestDeleteAnswer:
    """Tests for AnswerRepository.delete."""

    def test_delete_closes_gap(self, data_access, answered_puzzle):
        """Answers after the deleted one move down."""
        puzzle, answers = answered_puzzle
        assert data_access.answers.delete(answers[0].id) is True

        assert _ordered(data_access, puzzle.id) == [("10", 0), ("100", 1)]

    def test_delete_last(self, data_access, answered_puzzle):
        """Deleting the last answer leaves the rest untouched."""
        puzzle, answers = answered_puzzle
        data_access.answers.delete(answers[2].id)

        assert _ordered(data_access, puzzle.id) == [("0", 0), ("10", 1)]

    def test_delete_missing(self, data_access):
        """Deleting an unknown answer reports False."""
        assert data_access.answers.delete(999) is False

    def test_indexes_stay_contiguous(self, data_access, puzzle):
        """Any mix of inserts, moves and deletes keeps indexes 0..n-1."""
        ids = [data_access.answers.create(puzzle.id, str(i)).id for i in range(5)]
        data_access.answers.create(puzzle.id, "a", 2)
        data_access.answers.update(ids[4], answer_index=0)
        data_access.answers.delete(ids[1])
        data_access.answers.update(ids[0], answer_index=99)
        data_access.answers.delete(ids[3])

        indexes = [i for _, i in _ordered(data_access, puzzle.id)]
        assert indexes == list(range(4))


class TestConcurrentWriters:
    """Reorders from several connections at once serialize."""

    def test_concurrent_inserts_keep_indexes_contiguous(self, data_access, puzzle):
        """4 threads x 10 inserts at index 0 leave indexes exactly 0..39."""
        errors = []

        def insert_many(worker: int) -> None:
            try:
                for i in range(10):
                    data_access.answers.create(puzzle.id, f"{worker}-{i}", 0)
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=insert_many, args=(w,)) for w in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        indexes = [i for _, i in _ordered(data_access, puzzle.id)]
        assert indexes == list(range(40))

    def test_concurrent_moves_and_deletes(self, data_access, puzzle):
        """Mixed moves and deletes across threads never leave gaps."""
        ids = [data_access.answers.create(puzzle.id, str(i)).id for i in range(20)]
        errors = []

        def move(answer_ids):
            try:
                for n, answer_id in enumerate(answer_ids):
                    data_access.answers.update(answer_id, answer_index=n % 5)
            except Exception as e:
                errors.append(e)

        def delete(answer_ids):
            try:
                for answer_id in answer_ids:
                    data_access.answers.delete(answer_id)
            except Exception as e:
                errors.append(e)

        threads = [
            threading.Thread(target=move, args=(ids[:10],)),
            threading.Thread(target=move, args=(list(reversed(ids[:10])),)),
            threading.Thread(target=delete, args=(ids[10:15],)),
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        indexes = [i for _, i in _ordered(data_access, puzzle.id)]
        assert indexes == list(range(15))
