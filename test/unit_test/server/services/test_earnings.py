"""Unit tests for the pure helpers of the earnings service."""

from types import SimpleNamespace

import pytest

from streamo.core.errors import NotFoundError
from streamo.server.services.earnings import apply_split, parse_statement_id, statement_period


@pytest.mark.parametrize("split,expected", [(50, 50.0), (80, 80.0), (0, 0.0), (None, 0.0), (33.3, 33.3)])
def test_apply_split(split, expected):
    assert apply_split(100, SimpleNamespace(split=split)) == expected


def test_statement_period():
    assert statement_period(2024, 3) == ("2024-03", "Mar 2024")


class TestParseStatementId:
    def test_valid(self):
        assert parse_statement_id("2024-12") == (2024, 12)

    @pytest.mark.parametrize("value", ["2024-13", "2024-00", "2024-3", "stmt-1", ""])
    def test_invalid(self, value):
        with pytest.raises(NotFoundError):
            parse_statement_id(value)
