"""Tests for registrar.transcript.mark module."""

from __future__ import annotations

import decimal

import pytest

from registrar.transcript.mark import mean, round_mark


class TestRoundMark(object):
    @pytest.mark.parametrize(
        "value,expected",
        [
            (12.344, 12.34),
            (12.345, 12.35),
            (2.675, 2.68),
            (1.005, 1.01),
            (10, 10.0),
            (-1.005, -1.01),
            (decimal.Decimal("3.14159"), 3.14),
        ],
    )
    def test_half_up_two_places(self, value: float, expected: float) -> None:
        assert round_mark(value) == expected

    def test_idempotent(self) -> None:
        """Rounding an already rounded mark changes nothing."""
        assert round_mark(round_mark(13.3333)) == round_mark(13.3333)


class TestMean(object):
    def test_mean(self) -> None:
        assert mean([10, 12, 17]) == 13

    def test_empty(self) -> None:
        assert mean([]) is None
