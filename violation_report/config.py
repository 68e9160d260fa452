"""Configuration loading and validation.

Usage:
    config = load("violation-report.yaml")     # raises ConfigError on bad config
    rule = config.resolve_rule("layers")       # returns the full rule text
    generate_template("violation-report.yaml") # writes example file to disk
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from violation_report.models import ViolationReportError

DEFAULT_CONFIG = "violation-report.yaml"
DEFAULT_REPORT = "violations.json"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class ConfigError(ViolationReportError):
    """Raised when the configuration is missing or invalid."""


# ---------------------------------------------------------------------------
# Config dataclass
# ---------------------------------------------------------------------------

@dataclass
class Config:
    report: str = DEFAULT_REPORT
    indent: int | None = None
    rules: dict[str, str] = field(default_factory=dict)

    def resolve_rule(self, name: str) -> str:
        """Return the rule text for a given alias.

        Names that are not configured aliases are taken as the rule text
        itself, so rules do not have to be declared up front.
        """
        if not name or not name.strip():
            raise ConfigError("Rule name must not be empty.")
        return self.rules.get(name, name)


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------

def load(config_path: str = DEFAULT_CONFIG) -> Config:
    """Load and validate configuration from a YAML file.

    The VIOLATION_REPORT_PATH environment variable overrides ``report``.

    Raises:
        ConfigError: if the file is missing, malformed, or fields are invalid.
    """
    path = Path(config_path)

    if not path.exists():
        raise ConfigError(
            f"Config file not found: '{config_path}'\n"
            "Run `python -m violation_report init` to generate a template."
        )

    try:
        with path.open(encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse '{config_path}': {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"'{config_path}' must be a YAML mapping at the top level.")

    report = os.environ.get("VIOLATION_REPORT_PATH") or raw.get("report", DEFAULT_REPORT)
    config = Config(
        report=str(report or "").strip(),
        indent=raw.get("indent"),
        rules=raw.get("rules") or {},
    )
    _validate(config)
    return config


def _validate(config: Config) -> None:
    """Raise ConfigError if any field is invalid."""
    errors: list[str] = []

    if not config.report:
        errors.append(
            "  - 'report' is empty (or set the VIOLATION_REPORT_PATH environment variable)"
        )
    # bool is an int subclass
    if config.indent is not None and (
        isinstance(config.indent, bool) or not isinstance(config.indent, int) or config.indent < 0
    ):
        errors.append("  - 'indent' must be null or a non-negative integer")
    if not isinstance(config.rules, dict):
        errors.append("  - 'rules' must be a mapping of alias: rule text")
    else:
        for alias, text in config.rules.items():
            if not isinstance(text, str) or not text.strip():
                errors.append(f"  - rule alias '{alias}' has no rule text")

    if errors:
        raise ConfigError("Invalid configuration:\n" + "\n".join(errors))


# ---------------------------------------------------------------------------
# Template generator (used by `init` command)
# ---------------------------------------------------------------------------

TEMPLATE = """\
report: "violations.json"      # Persisted report, shared by all rules
indent: 2                      # null for compact output

rules:
  # Short alias: full rule text as shown in the report
  layers: "classes that reside in a package '..service..' should only be accessed by '..controller..'"
  no-cycles: "slices matching '..(*)..' should be free of cycles"
"""


def generate_template(output_path: str = DEFAULT_CONFIG) -> None:
    """Write a template violation-report.yaml to *output_path*.

    Raises:
        ConfigError: if the file already exists.
    """
    path = Path(output_path)
    if path.exists():
        raise ConfigError(
            f"'{output_path}' already exists. Remove it first or choose a different path."
        )
    path.write_text(TEMPLATE, encoding="utf-8")
