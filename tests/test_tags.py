"""Tests for periodic_para/tags.py."""

import pytest

from periodic_para.errors import NoTagsDeclared
from periodic_para.tags import build_tag_predicate, has_common_prefix, normalize_tags, parse_tag_predicate


def test_common_prefix():
    assert has_common_prefix(["#work/a"], ["#work"]) is True
    assert has_common_prefix(["#life"], ["#work"]) is False


def test_common_prefix_is_not_segment_aware():
    assert has_common_prefix(["#work2"], ["#work"]) is True


def test_common_prefix_empty():
    assert has_common_prefix([], ["#work"]) is False
    assert has_common_prefix(["#work"], []) is False


def test_build_predicate():
    assert build_tag_predicate(["work"]) == 'contains(tags, "#work")'
    assert build_tag_predicate(["work", "#life"]) == 'contains(tags, "#work") OR contains(tags, "#life")'


def test_build_predicate_without_tags():
    with pytest.raises(NoTagsDeclared) as exc:
        build_tag_predicate([])
    assert "No front matter tags" in exc.value.message


def test_parse_predicate():
    assert parse_tag_predicate(build_tag_predicate(["work", "life/family"])) == ["work", "life/family"]


def test_normalize_tags():
    assert normalize_tags("work") == ["work"]
    assert normalize_tags("#work, life") == ["work", "life"]
    assert normalize_tags(["work", "#work", "a b"]) == ["work", "a", "b"]
    assert normalize_tags(None) == []
    assert normalize_tags([]) == []
