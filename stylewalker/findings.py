from dataclasses import dataclass
from enum import Enum

from stylewalker.syntax import Location


class Severity(Enum):
    WARNING = "warning"
    ERROR = "error"

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(member.value for member in cls)
            raise ValueError(f"Unknown severity {value!r} (expected one of: {valid})") from None


@dataclass(frozen=True)
class Finding:
    rule_id: str
    message: str
    location: Location
    severity: Severity = Severity.WARNING

    @property
    def line(self) -> int:
        return self.location.line

    @property
    def column(self) -> int:
        return self.location.column

    def sort_key(self):
        return (self.location.line, self.location.column, self.rule_id)


@dataclass(frozen=True)
class AnalysisResult:
    """
    Findings of one analysis run, in traversal order, with per-severity counts.
    """

    findings: tuple
    counts: tuple

    @classmethod
    def from_findings(cls, findings):
        findings = tuple(findings)
        counts = tuple(
            (severity, sum(1 for item in findings if item.severity is severity))
            for severity in Severity
        )
        return cls(findings=findings, counts=counts)

    def count(self, severity) -> int:
        severity = Severity.parse(severity)
        for key, value in self.counts:
            if key is severity:
                return value
        return 0

    @property
    def summary(self) -> dict:
        return {severity.value: value for severity, value in self.counts}

    @property
    def total(self) -> int:
        return len(self.findings)

    @property
    def has_errors(self) -> bool:
        return self.count(Severity.ERROR) > 0
