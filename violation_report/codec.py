"""JSON encoding and decoding of violation reports.

Usage:
    record  = record_from(CallViolation("A.run()", "B.call()", "..."))
    results = decode(reader)                 # raises DecodeError on bad input
    encode(results, writer, indent=2)        # raises EncodeError on failure

Document format::

    [{"rule": "...", "violations": [{"origin": "...", "target": "...", "description": "..."}]}]
"""

import json
from typing import Any, TextIO

from violation_report.models import RuleResult, ViolationRecord, ViolationReportError

_RECORD_FIELDS = ("origin", "target", "description")


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class DecodeError(ViolationReportError):
    """Raised when an existing report is not a valid violation document."""


class EncodeError(ViolationReportError):
    """Raised when the merged report cannot be serialized or written."""


# ---------------------------------------------------------------------------
# Violation -> record
# ---------------------------------------------------------------------------

def record_from(violation: Any) -> ViolationRecord:
    """Normalize a call or field-access violation into a ViolationRecord."""
    return ViolationRecord(
        origin=_as_text(violation.origin),
        target=_as_text(violation.target),
        description=_as_text(getattr(violation, "description", None)),
    )


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


# ---------------------------------------------------------------------------
# Document <-> RuleResult list
# ---------------------------------------------------------------------------

def decode(source: TextIO) -> list[RuleResult]:
    """Read a whole report document from *source*.

    Empty input and a JSON ``null`` document both decode to an empty list.

    Raises:
        DecodeError: malformed JSON or unexpected document structure.
    """
    try:
        text = source.read()
    except UnicodeDecodeError as exc:
        raise DecodeError(f"Existing report is not valid UTF-8: {exc}") from exc
    if not text.strip():
        return []
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DecodeError(f"Existing report is not valid JSON: {exc}") from exc
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise DecodeError("Existing report must be a JSON array of rule results.")
    return [_decode_result(entry, index) for index, entry in enumerate(raw)]


def _decode_result(entry: Any, index: int) -> RuleResult:
    if not isinstance(entry, dict):
        raise DecodeError(f"Entry #{index} must be an object, got {type(entry).__name__}")
    rule = entry.get("rule")
    if not isinstance(rule, str) or not rule:
        raise DecodeError(f"Entry #{index} has no rule name")
    violations = entry.get("violations")
    if violations is None:
        violations = []
    if not isinstance(violations, list):
        raise DecodeError(f"Entry #{index} ('{rule}'): 'violations' must be an array")

    result = RuleResult(rule)
    for item in violations:
        if not isinstance(item, dict):
            raise DecodeError(f"Entry #{index} ('{rule}'): violations must be objects")
        result.add_violation(ViolationRecord(**{f: _as_text(item.get(f)) for f in _RECORD_FIELDS}))
    return result


def encode(results: list[RuleResult], destination: TextIO, indent: int | None = None) -> None:
    """Serialize *results* and write them to *destination* (left open).

    Raises:
        EncodeError: content is not serializable or the write failed. The
                     destination may then hold a partial document.
    """
    data = [r.to_dict() for r in results]
    try:
        json.dump(data, destination, indent=indent, ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise EncodeError(f"Failed to serialize report: {exc}") from exc
    except OSError as exc:
        raise EncodeError(f"Failed to write report: {exc}") from exc
