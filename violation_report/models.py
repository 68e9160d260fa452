"""Data models for violation reports.

Contains the dataclasses used to structure and serialize the JSON output:
    - CallViolation / FieldAccessViolation   raw violations from the analyzer
    - ViolationRecord                        normalized, exported violation
    - RuleResult                             all records found for one rule
    - ViolationBatches                       evaluation result read from a file
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterable, Protocol

import yaml


class ViolationReportError(Exception):
    """Base exception for all violation report errors."""


class ViolationInputError(ViolationReportError):
    """Raised when an analyzer output file cannot be turned into violations."""


# ---------------------------------------------------------------------------
# Raw violations (produced by the analyzer)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CallViolation:
    """A method or constructor call that breaks a rule."""
    origin: str
    target: str
    description: str | None = None


@dataclass(frozen=True)
class FieldAccessViolation:
    """A field read or write that breaks a rule."""
    origin: str
    target: str
    description: str | None = None
    access_type: str = "get"


Violation = CallViolation | FieldAccessViolation

BatchHandler = Callable[[list, str], None]


class EvaluationResult(Protocol):
    def handle_violations(self, kind: type, handler: BatchHandler) -> None:
        """Call *handler(batch, message)* once per batch of *kind* violations."""
        ...


# ---------------------------------------------------------------------------
# Exported records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ViolationRecord:
    origin: str
    target: str
    description: str

    def to_dict(self) -> dict[str, str]:
        return {
            "origin":      self.origin,
            "target":      self.target,
            "description": self.description,
        }


@dataclass(frozen=True)
class RuleResult:
    """Violations found for one rule during one evaluation run.

    ``rule`` is fixed at construction. ``violations`` keeps discovery order
    and may contain duplicates.
    """
    rule: str
    violations: list[ViolationRecord] = field(default_factory=list)

    def add_violation(self, record: ViolationRecord) -> None:
        self.violations.append(record)

    def to_dict(self) -> dict[str, Any]:
        return {
            "rule":       self.rule,
            "violations": [v.to_dict() for v in self.violations],
        }


# ---------------------------------------------------------------------------
# File-backed evaluation result
# ---------------------------------------------------------------------------

# Section name in the analyzer output -> violation variant
_SECTIONS: dict[str, type] = {
    "calls":          CallViolation,
    "field_accesses": FieldAccessViolation,
}


@dataclass
class ViolationBatches:
    """Evaluation result holding pre-computed ``(violations, message)`` batches."""
    batches: list[tuple[list[Violation], str]] = field(default_factory=list)

    def add_batch(self, violations: Iterable[Violation], message: str = "") -> None:
        self.batches.append((list(violations), message))

    def handle_violations(self, kind: type, handler: BatchHandler) -> None:
        for violations, message in self.batches:
            matching = [v for v in violations if isinstance(v, kind)]
            if matching:
                handler(matching, message)

    @classmethod
    def from_mapping(cls, raw: Any) -> "ViolationBatches":
        """Build batches from parsed analyzer output.

        Each section (``calls``, ``field_accesses``) holds a list of batches.
        A batch is either ``{"message": ..., "violations": [...]}`` or a bare
        list of violation mappings.

        Raises:
            ViolationInputError: if the structure does not match.
        """
        if raw is None:
            return cls()
        if not isinstance(raw, dict):
            raise ViolationInputError("Analyzer output must be a mapping at the top level.")

        unknown = set(raw) - set(_SECTIONS)
        if unknown:
            raise ViolationInputError(
                f"Unknown section(s): {', '.join(sorted(unknown))}. "
                f"Expected: {', '.join(_SECTIONS)}"
            )

        result = cls()
        for section, kind in _SECTIONS.items():
            for batch in raw.get(section) or []:
                if isinstance(batch, list):
                    items, message = batch, ""
                elif isinstance(batch, dict):
                    items, message = batch.get("violations") or [], batch.get("message") or ""
                else:
                    raise ViolationInputError(f"'{section}' batches must be lists or mappings.")
                result.add_batch((_build_violation(kind, item, section) for item in items), str(message))
        return result

    @classmethod
    def load(cls, path: str) -> "ViolationBatches":
        """Read analyzer output from a JSON (``.json``) or YAML file."""
        p = Path(path)
        if not p.exists():
            raise ViolationInputError(f"Violations file not found: '{path}'")
        try:
            with p.open(encoding="utf-8") as f:
                if p.suffix.lower() == ".json":
                    raw = json.load(f)
                else:
                    raw = yaml.safe_load(f)
        except (json.JSONDecodeError, yaml.YAMLError, UnicodeDecodeError) as exc:
            raise ViolationInputError(f"Failed to parse '{path}': {exc}") from exc
        return cls.from_mapping(raw)


def _build_violation(kind: type, item: Any, section: str) -> Violation:
    if not isinstance(item, dict):
        raise ViolationInputError(f"Entries in '{section}' must be mappings, got {item!r}")
    missing = [k for k in ("origin", "target") if not item.get(k)]
    if missing:
        raise ViolationInputError(
            f"Entry in '{section}' is missing {', '.join(missing)}: {item!r}"
        )
    kwargs = {
        "origin":      str(item["origin"]),
        "target":      str(item["target"]),
        "description": item.get("description"),
    }
    if kind is FieldAccessViolation and item.get("access_type"):
        kwargs["access_type"] = str(item["access_type"]).lower()
    return kind(**kwargs)
