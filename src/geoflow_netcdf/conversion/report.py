"""
Conversion report.

Buffers the non-fatal issues of a conversion run (skipped attributes,
variables abandoned in best-effort mode) so the caller can decide whether
the resulting file is acceptable.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Literal

ReportLevel = Literal["info", "warning", "error"]


@dataclass
class ReportEntry:
    """Single report message."""
    level: ReportLevel
    entity: str
    text: str
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


class ConversionReport:
    """Collects report entries in the order they were raised.

    Usage::

        report = ConversionReport()
        report.warning("lat:valid_min", "not a valid double")
        if report.has_errors:
            ...
    """

    def __init__(self) -> None:
        self._entries: List[ReportEntry] = []

    # ---- convenience methods ----

    def info(self, entity: str, text: str) -> None:
        self._entries.append(ReportEntry(level="info", entity=entity, text=text))

    def warning(self, entity: str, text: str) -> None:
        self._entries.append(ReportEntry(level="warning", entity=entity, text=text))

    def error(self, entity: str, text: str) -> None:
        self._entries.append(ReportEntry(level="error", entity=entity, text=text))

    # ---- query ----

    @property
    def has_errors(self) -> bool:
        return any(e.level == "error" for e in self._entries)

    @property
    def has_warnings(self) -> bool:
        return any(e.level == "warning" for e in self._entries)

    @property
    def warnings(self) -> List[ReportEntry]:
        return [e for e in self._entries if e.level == "warning"]

    @property
    def errors(self) -> List[ReportEntry]:
        return [e for e in self._entries if e.level == "error"]

    @property
    def entries(self) -> List[ReportEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
