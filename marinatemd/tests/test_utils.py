"""
Tests for marker helpers.
"""

from __future__ import annotations

import pytest

from marinatemd.utils import (
    end_marker,
    find_end_marker,
    find_marker_ids,
    find_start_marker,
    leading_whitespace,
    normalize_marker_id,
    start_marker,
)


def test_markers():
    assert start_marker("app_config") == "<!-- MARINATED: app_config -->"
    assert end_marker("app_config") == "<!-- /MARINATED: app_config -->"


def test_normalize():
    assert normalize_marker_id(" a\\_b ") == "a_b"


def test_find_start_and_end_marker():
    text = "x <!--MARINATED:a\\_b--> y <!-- /MARINATED: a_b -->"

    start = find_start_marker(text, "a_b")
    end = find_end_marker(text, "a_b", start.end())

    assert start.group(0) == "<!--MARINATED:a\\_b-->"
    assert start.group(1) == "a\\_b"
    assert end.group(0) == "<!-- /MARINATED: a_b -->"
    assert find_start_marker(text, "a") is None
    assert find_end_marker(text, "a_b", end.end()) is None


@pytest.mark.parametrize(
    "text, expected",
    [
        ("<!--MARINATED:x-->", ["x"]),
        ("<!-- /MARINATED: x -->", []),
        ("<!-- MARINATED: a.b-c -->", ["a.b-c"]),
        ("<!-- MARINATED: b --> <!-- MARINATED: a --> <!-- MARINATED: b -->", ["b", "a"]),
    ],
)
def test_find_marker_ids(text, expected):
    assert find_marker_ids(text) == expected


def test_leading_whitespace():
    assert leading_whitespace("\t  x  ") == "\t  "
    assert leading_whitespace("x") == ""
