"""Tests for noteslab.calculation."""

from __future__ import annotations

import pytest

from noteslab.calculation import evaluate


@pytest.mark.parametrize('expression, expected', [
    ('(2 + 3) * 4', '20'),
    ('7 / 2', '3.5'),
    ('1 / 3', '0.3333'),
    ('-4 + +1', '-3'),
    ('1234567 * 1', '1,234,567'),
    (' 2.50 * 2 ', '5'),
    ('-0.00001', '0'),
    ('123456789012 * 1000', '123,456,789,012'),
])
def test_evaluates(expression, expected):
    assert evaluate(expression) == expected


@pytest.mark.parametrize('expression', ['', '   ', '3 +', '4.', '(1 + 2) /'])
def test_incomplete_is_pending(expression):
    assert evaluate(expression) == '...'


@pytest.mark.parametrize('expression', [
    '2 + x',
    '2 ** 3',
    '1 / 0',
    '2 3',
    '(1 + 2',
    '()',
    '1..2',
    '9' * 400,
    'import os',
])
def test_invalid_is_question_mark(expression):
    assert evaluate(expression) == '?'
