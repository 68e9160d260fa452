"""Export of one rule's evaluation result into a JSON report.

Usage:
    exporter = JsonViolationExporter(indent=2)
    with open("violations.json") as src:
        existing = src.read()
    with open("violations.json", "w") as dst:
        exporter.export(rule, result, io.StringIO(existing), dst)

    exporter.export_new(rule, result, dst)   # first export, nothing to merge
"""

from typing import TextIO

from violation_report.codec import decode, encode, record_from
from violation_report.models import (
    CallViolation,
    EvaluationResult,
    FieldAccessViolation,
    RuleResult,
)
from violation_report.results import insert_result

# Extraction order: calls are recorded before field accesses
_VIOLATION_KINDS = (CallViolation, FieldAccessViolation)


class JsonViolationExporter:
    """Merges freshly evaluated rules into a persisted violation document.

    Streams are read and written but never closed; the caller owns them.
    """

    def __init__(self, indent: int | None = None) -> None:
        self.indent = indent

    def export(
        self,
        rule: str,
        result: EvaluationResult,
        source: TextIO,
        destination: TextIO,
    ) -> RuleResult:
        """Merge *result* into the document read from *source*, write to *destination*.

        An empty *source* counts as an empty document.

        Raises:
            DecodeError: *source* is malformed. Nothing is written.
            EncodeError: the merged document could not be written.
        """
        existing = decode(source)
        return self._export(rule, result, existing, destination)

    def export_new(self, rule: str, result: EvaluationResult, destination: TextIO) -> RuleResult:
        """Write a document containing only *rule*'s result."""
        return self._export(rule, result, [], destination)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _export(
        self,
        rule: str,
        result: EvaluationResult,
        existing: list[RuleResult],
        destination: TextIO,
    ) -> RuleResult:
        rule_result = RuleResult(rule)
        for kind in _VIOLATION_KINDS:
            _extract(result, kind, rule_result)
        merged = insert_result(rule_result, existing)
        encode(merged, destination, indent=self.indent)
        return rule_result


def _extract(result: EvaluationResult, kind: type, rule_result: RuleResult) -> None:
    def handle(violations, message):
        for violation in violations:
            rule_result.add_violation(record_from(violation))

    result.handle_violations(kind, handle)
