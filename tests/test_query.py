"""Tests for core/query.py"""
from deep_search_mcp.core.query import build_query, split_domains


def test_include_and_exclude():
    assert build_query("cats", ["a.com", "b.com"], ["c.com"]) == \
        "cats site:a.com OR site:b.com -site:c.com"


def test_no_filters_is_identity():
    assert build_query("cats") == "cats"
    assert build_query("cats", [], []) == "cats"


def test_exclude_only_space_joined():
    assert build_query("dogs", exclude_domains=["x.com", "y.com"]) == "dogs -site:x.com -site:y.com"


def test_domains_are_trimmed_not_validated():
    assert build_query("q", [" a.com ", "not a domain"]) == "q site:a.com OR site:not a domain"


def test_split_domains_comma_string():
    assert split_domains("reddit.com, github.com ,") == ["reddit.com", "github.com"]


def test_split_domains_empty_values():
    assert split_domains(None) == []
    assert split_domains("") == []
    assert split_domains(" , ") == []


def test_split_domains_list():
    assert split_domains([" a.com", "", "b.com "]) == ["a.com", "b.com"]
