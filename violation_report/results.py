"""Merging rule results into a report.

Functions:
    insert_result(new_result, existing)   -> list[RuleResult]
    summarize(results)                    -> dict
"""

import warnings
from collections import Counter

from violation_report.models import RuleResult


def insert_result(new_result: RuleResult, existing: list[RuleResult]) -> list[RuleResult]:
    """Return *existing* with *new_result* merged in.

    An entry with the same rule name is replaced at its current position;
    its previous violations are dropped. Otherwise *new_result* is appended.
    Rule names are compared exactly. *existing* itself is not modified.
    """
    merged = list(existing)

    counts = Counter(r.rule for r in merged)
    if counts[new_result.rule] > 1:
        warnings.warn(
            f"Rule '{new_result.rule}' appears {counts[new_result.rule]} times in the "
            "existing report; only the first entry is replaced.",
            UserWarning,
            stacklevel=2,
        )

    for index, result in enumerate(merged):
        if result.rule == new_result.rule:
            merged[index] = new_result
            return merged

    merged.append(new_result)
    return merged


def summarize(results: list[RuleResult]) -> dict:
    by_rule = {r.rule: len(r.violations) for r in results}
    return {
        "total_rules":      len(results),
        "total_violations": sum(by_rule.values()),
        "by_rule":          by_rule,
    }
