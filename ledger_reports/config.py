"""
Report Builder Configuration Schema.

Defines the per-level code digit lengths used to classify account codes,
plus presentation defaults.  Account codes are hierarchical by prefix:
with the default lengths, account ``111007`` belongs to group ``11``,
general ``1110`` and specific ``111007``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Self

import yaml

from ledger_kernel.exceptions import InvalidConfigurationError
from ledger_kernel.logging_config import get_logger
from ledger_reports.levels import ACCOUNT_LEVELS, HierarchyLevel

logger = get_logger("reports.config")


def _valid_length(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


@dataclass(frozen=True)
class CodeDigits:
    """
    Number of leading account-code characters that identify each level.

    An invalid length (missing, zero, negative, non-integer) means "no
    truncation" for that level rather than an error, so a bad setting can
    never collapse every account into the empty code.
    """

    group: int | None = 2
    general: int | None = 4
    specific: int | None = 6

    def __post_init__(self):
        invalid = {
            name: getattr(self, name)
            for name in ("group", "general", "specific")
            if not _valid_length(getattr(self, name))
        }
        if invalid:
            logger.warning(
                "code_digits_invalid_falls_back_to_full_length",
                extra={"invalid_levels": invalid},
            )

    def length_for(self, level: HierarchyLevel) -> int | None:
        """Truncation length for an account level, or None for no truncation."""
        if level not in ACCOUNT_LEVELS:
            return None
        value = getattr(self, level.name.lower())
        return value if _valid_length(value) else None


@dataclass
class LedgerReportConfig:
    """
    Configuration schema for the report builder.

    Controls code classification and presentation defaults.
    """

    # Per-level account code lengths
    code_digits: CodeDigits = field(default_factory=CodeDigits)

    # Entity name shown in report metadata
    entity_name: str = "Company"

    # Decimal places used when rendering amounts
    display_precision: int = 2

    # Rows per page when the caller does not choose
    default_page_size: int = 50

    # Whether Total rows follow each group by default
    show_group_totals: bool = True

    def __post_init__(self):
        if self.display_precision < 0:
            raise ValueError("display_precision cannot be negative")
        if self.default_page_size <= 0:
            raise ValueError("default_page_size must be positive")

    @classmethod
    def with_defaults(cls) -> Self:
        """Create config with standard defaults."""
        logger.info("report_config_created_with_defaults")
        return cls()

    @classmethod
    def from_dict(cls, data: dict[str, Any], source: str = "<dict>") -> Self:
        """Create config from a dictionary (e.g. parsed YAML)."""
        data = dict(data)
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidConfigurationError(source, f"unknown keys {unknown}")
        digits = data.get("code_digits")
        if isinstance(digits, dict):
            bad = sorted(set(digits) - {"group", "general", "specific"})
            if bad:
                raise InvalidConfigurationError(source, f"unknown code_digits keys {bad}")
            data["code_digits"] = CodeDigits(**digits)
        elif digits is not None and not isinstance(digits, CodeDigits):
            raise InvalidConfigurationError(source, "code_digits must be a mapping")
        logger.info(
            "report_config_loading_from_dict",
            extra={"keys": sorted(data.keys()), "source": source},
        )
        try:
            return cls(**data)
        except ValueError as exc:
            raise InvalidConfigurationError(source, str(exc)) from exc


def load_report_config(path: Path | str) -> LedgerReportConfig:
    """
    Load a LedgerReportConfig from a YAML file.

    An empty file yields the defaults.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        InvalidConfigurationError: if the document is not a mapping or
            carries unknown/invalid keys.
    """
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return LedgerReportConfig.with_defaults()
    if not isinstance(data, dict):
        raise InvalidConfigurationError(str(path), "top-level document must be a mapping")
    return LedgerReportConfig.from_dict(data, source=str(path))
