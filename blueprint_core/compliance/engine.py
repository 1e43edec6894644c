"""
Compliance evaluation entry points

``evaluate`` accepts wizard answers, a single sheet or a whole blueprint and
returns a ``ComplianceReport``. Evaluation is pure: the same input always
produces the same report.
"""

from __future__ import annotations

from typing import Optional, Union

from loguru import logger

from ..model.integrity import check_integrity
from ..model.schema import BlueprintData, Sheet
from ..reconstruct.openings import resolve_openings
from ..reconstruct.topology import reconstruct
from ..settings import Settings, get_settings
from .report import ComplianceReport, IssueCollector
from .rules import PLAN_RULES, PlanContext, check_egress
from .wizard import WizardAnswers, evaluate_answers

Subject = Union[WizardAnswers, Sheet, BlueprintData]


def evaluate_sheet(
    sheet: Sheet,
    *,
    settings: Optional[Settings] = None,
    include_integrity: bool = True,
) -> ComplianceReport:
    """Run all plan rules, the egress analysis and the integrity checks on one sheet."""
    settings = settings or get_settings()
    tolerances = settings.topology

    # Compliance reports overflowing openings; it never rejects them.
    resolved, dangling = resolve_openings(sheet.elements.openings, sheet.elements.walls, strict=False)
    ctx = PlanContext(sheet=sheet, resolved=resolved, dangling=dangling)
    out = IssueCollector(include_checks=settings.compliance.include_checks)

    for rule in PLAN_RULES:
        rule(ctx, out)
    egress = check_egress(ctx, out)

    if include_integrity:
        topology = reconstruct(
            sheet.elements.walls,
            loop_tolerance=tolerances.loop_tolerance,
            connection_tolerance=tolerances.connection_tolerance,
        )
        for item in check_integrity(
            sheet,
            topology=topology,
            loop_tolerance=tolerances.loop_tolerance,
            connection_tolerance=tolerances.connection_tolerance,
        ):
            out.add(item)

    report = out.report(egress)
    logger.info(
        "Evaluated sheet {number}: {violations} violations, {warnings} warnings",
        number=sheet.number,
        violations=len(report.violations),
        warnings=len(report.warnings),
    )
    return report


def evaluate(
    subject: Subject,
    *,
    sheet_index: int = 0,
    settings: Optional[Settings] = None,
) -> ComplianceReport:
    """Evaluate wizard answers or a plan.

    Args:
        subject: ``WizardAnswers``, a ``Sheet`` or a ``BlueprintData``.
        sheet_index: Sheet to evaluate when ``subject`` is a blueprint.
        settings: Engine settings; defaults to ``get_settings()``.

    Raises:
        SheetNotFoundError: If the blueprint has no sheet at ``sheet_index``.
        TypeError: For any other subject type.
    """
    settings = settings or get_settings()
    if isinstance(subject, WizardAnswers):
        return evaluate_answers(subject, include_checks=settings.compliance.include_checks)
    if isinstance(subject, Sheet):
        return evaluate_sheet(subject, settings=settings)
    if isinstance(subject, BlueprintData):
        return evaluate_sheet(subject.sheet(sheet_index), settings=settings)
    raise TypeError(f"Cannot evaluate {type(subject).__name__}")


__all__ = ["Subject", "evaluate", "evaluate_sheet"]
