"""Compliance issue and report types."""

from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field


class Severity(str, Enum):
    MINOR = "minor"
    MAJOR = "major"
    CRITICAL = "critical"


BLOCKING_SEVERITIES = frozenset({Severity.MAJOR, Severity.CRITICAL})


class ElementType(str, Enum):
    WALL = "wall"
    OPENING = "opening"
    ROOM = "room"
    GENERAL = "general"


class LocalizedText(BaseModel):
    en: str
    da: str

    def get(self, language: str = "en") -> str:
        return self.da if language == "da" else self.en


class ComplianceIssue(BaseModel):
    """One finding, keyed by a stable regulation code."""
    code: str
    message: LocalizedText
    severity: Severity
    elementId: Optional[str] = None
    elementType: Optional[ElementType] = None

    @property
    def blocking(self) -> bool:
        return self.severity in BLOCKING_SEVERITIES


class EgressAnalysis(BaseModel):
    passed: bool
    maxDistanceToExit: Optional[float] = Field(None, description="None when the plan has no exit doors")
    criticalRooms: List[str] = Field(default_factory=list)


class ComplianceReport(BaseModel):
    """Violations block approval, warnings do not, checks are confirmations."""
    violations: List[ComplianceIssue] = Field(default_factory=list)
    warnings: List[ComplianceIssue] = Field(default_factory=list)
    checks: List[ComplianceIssue] = Field(default_factory=list)
    egress: Optional[EgressAnalysis] = None

    @property
    def passing(self) -> bool:
        return not self.violations

    def summary(self) -> dict[str, Any]:
        return {
            "passing": self.passing,
            "totalViolations": len(self.violations),
            "totalWarnings": len(self.warnings),
            "totalChecks": len(self.checks),
        }

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready dict including the derived summary."""
        payload = self.model_dump(mode="json")
        payload["passing"] = self.passing
        payload["summary"] = self.summary()
        return payload


class IssueCollector:
    """Routes issues into report buckets by severity."""

    def __init__(self, *, include_checks: bool = True) -> None:
        self.include_checks = include_checks
        self.violations: List[ComplianceIssue] = []
        self.warnings: List[ComplianceIssue] = []
        self.checks: List[ComplianceIssue] = []

    def issue(
        self,
        code: str,
        severity: Severity,
        en: str,
        da: str,
        *,
        element_id: str | None = None,
        element_type: ElementType | None = None,
    ) -> ComplianceIssue:
        item = ComplianceIssue(
            code=code,
            message=LocalizedText(en=en, da=da),
            severity=severity,
            elementId=element_id,
            elementType=element_type,
        )
        self.add(item)
        return item

    def add(self, item: ComplianceIssue) -> None:
        if item.blocking:
            self.violations.append(item)
        else:
            self.warnings.append(item)

    def check(
        self,
        code: str,
        en: str,
        da: str,
        *,
        element_id: str | None = None,
        element_type: ElementType | None = None,
    ) -> None:
        if not self.include_checks:
            return
        self.checks.append(
            ComplianceIssue(
                code=code,
                message=LocalizedText(en=en, da=da),
                severity=Severity.MINOR,
                elementId=element_id,
                elementType=element_type,
            )
        )

    def report(self, egress: EgressAnalysis | None = None) -> ComplianceReport:
        return ComplianceReport(
            violations=list(self.violations),
            warnings=list(self.warnings),
            checks=list(self.checks),
            egress=egress,
        )


def count_by_severity(report: ComplianceReport) -> dict[str, int]:
    counts = {severity.value: 0 for severity in Severity}
    for item in report.violations + report.warnings:
        counts[item.severity.value] += 1
    return counts


def badge(report: ComplianceReport) -> str:
    """Short status line for the UI badge."""
    if report.passing:
        return "BR18/BR23 Compliant"
    count = len(report.violations)
    return f"{count} issue" if count == 1 else f"{count} issues"


__all__ = [
    "Severity",
    "BLOCKING_SEVERITIES",
    "ElementType",
    "LocalizedText",
    "ComplianceIssue",
    "EgressAnalysis",
    "ComplianceReport",
    "IssueCollector",
    "count_by_severity",
    "badge",
]
