"""Tests for violation_report/results.py"""

import warnings

import pytest

from violation_report.models import RuleResult, ViolationRecord
from violation_report.results import insert_result, summarize


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _result(rule: str, *targets: str) -> RuleResult:
    return RuleResult(rule, [ViolationRecord("A.a()", t, f"A.a() uses {t}") for t in targets])


# ---------------------------------------------------------------------------
# insert_result()
# ---------------------------------------------------------------------------

def test_insert_into_empty_appends():
    new = _result("R1", "B.b()")
    assert insert_result(new, []) == [new]


def test_insert_new_rule_is_appended_last():
    r1 = _result("R1", "B.b()")
    r2 = _result("R2", "C.c()")
    merged = insert_result(r2, [r1])
    assert [r.rule for r in merged] == ["R1", "R2"]
    assert merged[0] is r1


def test_insert_existing_rule_replaces_in_place():
    existing = [_result("R1"), _result("R2", "old"), _result("R3")]
    new = _result("R2", "new1", "new2")
    merged = insert_result(new, existing)
    assert [r.rule for r in merged] == ["R1", "R2", "R3"]
    assert merged[1] is new


def test_insert_replaces_instead_of_union():
    merged = insert_result(_result("R1", "v2", "v3"), [_result("R1", "v1")])
    assert [v.target for v in merged[0].violations] == ["v2", "v3"]


def test_insert_does_not_modify_existing_list():
    existing = [_result("R1")]
    insert_result(_result("R2"), existing)
    assert [r.rule for r in existing] == ["R1"]


def test_insert_rule_names_are_case_sensitive():
    merged = insert_result(_result("r1"), [_result("R1")])
    assert [r.rule for r in merged] == ["R1", "r1"]


def test_insert_rule_names_are_not_trimmed():
    merged = insert_result(_result("R1 "), [_result("R1")])
    assert len(merged) == 2


def test_insert_with_duplicated_rule_replaces_first_and_warns():
    first, second = _result("R1", "a"), _result("R1", "b")
    new = _result("R1", "c")
    with pytest.warns(UserWarning, match="appears 2 times"):
        merged = insert_result(new, [first, _result("R2"), second])
    assert merged[0] is new
    assert merged[2] is second


def test_insert_without_duplicates_does_not_warn():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        insert_result(_result("R1"), [_result("R1"), _result("R2")])


# ---------------------------------------------------------------------------
# summarize()
# ---------------------------------------------------------------------------

def test_summarize_counts_per_rule():
    s = summarize([_result("R1", "a", "b"), _result("R2")])
    assert s["total_rules"]      == 2
    assert s["total_violations"] == 2
    assert s["by_rule"]          == {"R1": 2, "R2": 0}


def test_summarize_empty():
    assert summarize([]) == {"total_rules": 0, "total_violations": 0, "by_rule": {}}
