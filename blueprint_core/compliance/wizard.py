"""
Wizard answer validation

Per-step checks on the project questionnaire plus a cross-field pass at the
confirmation step. Every area rule routes through ``min_area``.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field

from ..formatting import js_number
from .report import ComplianceReport, IssueCollector, LocalizedText, Severity
from .standards import STANDARDS


class WizardStep(str, Enum):
    ASK_BEDROOMS = "ask_bedrooms"
    ASK_BATHROOMS = "ask_bathrooms"
    ASK_FLOORS = "ask_floors"
    ASK_AREA = "ask_area"
    ASK_TYPE = "ask_type"
    ASK_LIFESTYLE = "ask_lifestyle"
    ASK_SPECIAL = "ask_special"
    CONFIRM = "confirm"


class StepSeverity(str, Enum):
    OK = "ok"
    WARNING = "warning"
    ERROR = "error"


class WizardAnswers(BaseModel):
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[int] = Field(None, ge=0)
    floors: Optional[int] = Field(None, ge=0)
    totalArea: Optional[float] = Field(None, ge=0.0, description="Requested gross floor area (m²)")
    buildingType: Optional[str] = None
    lifestyle: List[str] = Field(default_factory=list)
    specialRequirements: List[str] = Field(default_factory=list)


class StepResult(BaseModel):
    isValid: bool = True
    severity: StepSeverity = StepSeverity.OK
    message: Optional[LocalizedText] = None
    suggestedValue: Optional[int] = None
    code: Optional[str] = None


OK = StepResult()


def min_area(bedrooms: int | None = None, bathrooms: int | None = None) -> int:
    """Minimum realistic gross floor area for a room program.

    Net area is 12 m² per bedroom, 5 m² per bathroom and 25 m² for living and
    kitchen; 15% is added for circulation and 13% is lost to walls. Missing or
    zero counts are taken as 1.
    """
    bedrooms = bedrooms or 1
    bathrooms = bathrooms or 1
    net = (
        bedrooms * STANDARDS["AREA_PER_BEDROOM"]
        + bathrooms * STANDARDS["AREA_PER_BATHROOM"]
        + STANDARDS["AREA_LIVING_KITCHEN"]
    )
    with_circulation = net * STANDARDS["CIRCULATION_FACTOR"]
    return math.ceil(with_circulation / STANDARDS["NET_TO_GROSS"])


def max_reasonable_area(bedrooms: int | None = None, bathrooms: int | None = None) -> float:
    bedrooms = bedrooms or 1
    bathrooms = bathrooms or 1
    return (
        bedrooms * STANDARDS["MAX_AREA_PER_BEDROOM"]
        + bathrooms * STANDARDS["MAX_AREA_PER_BATHROOM"]
        + STANDARDS["MAX_AREA_BASE"]
    )


def _warning(code: str, en: str, da: str) -> StepResult:
    return StepResult(
        isValid=True,
        severity=StepSeverity.WARNING,
        message=LocalizedText(en=en, da=da),
        code=code,
    )


def _check_bedrooms(answers: WizardAnswers) -> StepResult:
    bedrooms = answers.bedrooms
    if not bedrooms:
        return OK
    if bedrooms >= STANDARDS["BEDROOM_COUNT_UNUSUAL"]:
        minimum = min_area(answers.bedrooms, answers.bathrooms)
        return _warning(
            "WIZARD-bedroom-count",
            f"{bedrooms} bedrooms is very unusual for a residential home. This will require a very large "
            f"floor area (at least {minimum}m²). Are you planning a large family home or a property with guest rooms?",
            f"{bedrooms} soveværelser er meget usædvanligt for en bolig. Det kræver et meget stort areal "
            f"(mindst {minimum}m²). Planlægger du et stort familiehus eller en ejendom med gæsteværelser?",
        )
    if bedrooms >= STANDARDS["BEDROOM_COUNT_NOTICE"]:
        return _warning(
            "WIZARD-bedroom-count",
            "That's quite a few bedrooms. Is this for a large family, or will some serve as guest rooms or studies?",
            "Det er ret mange soveværelser. Er det til en stor familie, eller skal nogle bruges som "
            "gæsteværelser eller studier?",
        )
    return OK


def _check_bathrooms(answers: WizardAnswers) -> StepResult:
    bathrooms = answers.bathrooms
    bedrooms = answers.bedrooms or 1
    if not bathrooms:
        return OK
    if bathrooms > bedrooms + 1:
        return _warning(
            "WIZARD-bathroom-ratio",
            f"{bathrooms} bathrooms for {bedrooms} bedroom(s) is more than usual. Most homes have 1-2 bathrooms "
            f"for every 2-3 bedrooms. Are you sure you need {bathrooms}?",
            f"{bathrooms} badeværelser til {bedrooms} soveværelse(r) er mere end normalt. De fleste hjem har "
            f"1-2 badeværelser per 2-3 soveværelser. Er du sikker på, at du har brug for {bathrooms}?",
        )
    return OK


def _check_area(answers: WizardAnswers) -> StepResult:
    total = answers.totalArea
    if not total:
        return OK
    minimum = min_area(answers.bedrooms, answers.bathrooms)
    maximum = max_reasonable_area(answers.bedrooms, answers.bathrooms)
    bedrooms = answers.bedrooms or 1
    bathrooms = answers.bathrooms or 1
    area = js_number(total)

    if total < minimum:
        return StepResult(
            isValid=False,
            severity=StepSeverity.ERROR,
            message=LocalizedText(
                en=(
                    f"With {bedrooms} bedroom(s) and {bathrooms} bathroom(s), the minimum realistic floor area is "
                    f"about {minimum}m². Your requested {area}m² would make rooms uncomfortably small and likely "
                    f"violate BR18 minimum room size requirements. Would you like to increase the area to at least "
                    f"{minimum}m², or reduce the number of rooms?"
                ),
                da=(
                    f"Med {bedrooms} soveværelse(r) og {bathrooms} badeværelse(r) er det mindste realistiske areal "
                    f"ca. {minimum}m². Dine ønskede {area}m² ville gøre rummene ubehageligt små og sandsynligvis "
                    f"overtræde BR18 minimumskrav til rumstørrelse. Vil du øge arealet til mindst {minimum}m² "
                    f"eller reducere antallet af rum?"
                ),
            ),
            suggestedValue=minimum,
            code="WIZARD-area-min",
        )

    if total > maximum:
        return _warning(
            "WIZARD-area-max",
            f"{area}m² is quite generous for {bedrooms} bedroom(s). I'll make sure the extra space is put to "
            f"good use with additional rooms like a home office, utility room, or spacious living areas.",
            f"{area}m² er ret generøst til {bedrooms} soveværelse(r). Jeg sørger for, at den ekstra plads "
            f"udnyttes godt med ekstra rum som hjemmekontor, bryggers eller rummelige opholdsarealer.",
        )
    return OK


def cross_field_notes(answers: WizardAnswers) -> List[Tuple[str, LocalizedText]]:
    """Informational notes for answer combinations that shape the layout."""
    notes: List[Tuple[str, LocalizedText]] = []
    multi_floor = (answers.floors or 1) > 1
    if not multi_floor:
        return notes

    if "elderly" in answers.lifestyle:
        notes.append((
            "WIZARD-elderly-floors",
            LocalizedText(
                en=(
                    "Since there are elderly residents and multiple floors, I'll make sure the master bedroom "
                    "and an accessible bathroom are on the ground floor."
                ),
                da=(
                    "Da der er ældre beboere og flere etager, sørger jeg for, at hovedsoveværelset og et "
                    "tilgængeligt badeværelse er på stueetagen."
                ),
            ),
        ))
    if "kids" in answers.lifestyle:
        notes.append((
            "WIZARD-kids-floors",
            LocalizedText(
                en="With kids in a multi-story home, I'll keep bedrooms close together and ensure safe stair access.",
                da=(
                    "Med børn i et fleretageshus sørger jeg for, at soveværelserne er tæt sammen og sikrer "
                    "sikker adgang til trapper."
                ),
            ),
        ))
    if "wheelchair_access" in answers.specialRequirements:
        notes.append((
            "WIZARD-wheelchair-floors",
            LocalizedText(
                en=(
                    "Wheelchair accessibility with multiple floors will require all essential rooms on the "
                    "ground floor. Upper floors will be secondary spaces."
                ),
                da=(
                    "Kørestolstilgængelighed med flere etager kræver, at alle vigtige rum er på stueetagen. "
                    "Øvre etager vil være sekundære rum."
                ),
            ),
        ))
    return notes


def area_recheck(answers: WizardAnswers) -> StepResult:
    """Stricter area test once both area and bedroom count are known."""
    if not (answers.totalArea and answers.bedrooms):
        return OK
    minimum = min_area(answers.bedrooms, answers.bathrooms)
    if answers.totalArea < minimum * STANDARDS["CONFIRM_AREA_FACTOR"]:
        area = js_number(answers.totalArea)
        return StepResult(
            isValid=False,
            severity=StepSeverity.ERROR,
            message=LocalizedText(
                en=(
                    f"Looking at the full picture, {area}m² is too tight for your requirements. "
                    f"I'd recommend at least {minimum}m². Would you like to adjust?"
                ),
                da=(
                    f"Når jeg ser på det samlede billede, er {area}m² for stramt til dine krav. "
                    f"Jeg anbefaler mindst {minimum}m². Vil du justere?"
                ),
            ),
            suggestedValue=minimum,
            code="WIZARD-area-recheck",
        )
    return OK


def cross_validate(answers: WizardAnswers) -> StepResult:
    """Confirmation-stage check: the area recheck wins over informational notes."""
    recheck = area_recheck(answers)
    if recheck.severity == StepSeverity.ERROR:
        return recheck

    notes = cross_field_notes(answers)
    if notes:
        return StepResult(
            isValid=True,
            severity=StepSeverity.WARNING,
            message=LocalizedText(
                en="\n\n".join(text.en for _, text in notes),
                da="\n\n".join(text.da for _, text in notes),
            ),
            code=notes[0][0] if len(notes) == 1 else "WIZARD-cross-field",
        )
    return OK


_STEP_CHECKS = {
    WizardStep.ASK_BEDROOMS: _check_bedrooms,
    WizardStep.ASK_BATHROOMS: _check_bathrooms,
    WizardStep.ASK_AREA: _check_area,
    WizardStep.CONFIRM: cross_validate,
}


def validate_step(step: WizardStep | str, answers: WizardAnswers) -> StepResult:
    """Validate one wizard step against all answers gathered so far.

    Steps without rules (floors, type, lifestyle, special requirements) and
    unknown step names always pass.
    """
    try:
        step = WizardStep(step)
    except ValueError:
        return OK
    check = _STEP_CHECKS.get(step)
    if check is None:
        return OK
    return check(answers)


def evaluate_answers(answers: WizardAnswers, *, include_checks: bool = True) -> ComplianceReport:
    """Run every single-field check, then the cross-field pass, as one report.

    Area errors surface as major violations; everything else is a minor
    warning. The confirmation recheck is only reported when the single-field
    area check did not already fail.
    """
    collector = IssueCollector(include_checks=include_checks)

    for step in (WizardStep.ASK_BEDROOMS, WizardStep.ASK_BATHROOMS, WizardStep.ASK_AREA):
        result = validate_step(step, answers)
        if result.severity == StepSeverity.OK:
            continue
        severity = Severity.MAJOR if result.severity == StepSeverity.ERROR else Severity.MINOR
        collector.issue(result.code or step.value, severity, result.message.en, result.message.da)

    area_failed = any(item.code == "WIZARD-area-min" for item in collector.violations)
    recheck = area_recheck(answers)
    if recheck.severity == StepSeverity.ERROR and not area_failed:
        collector.issue(recheck.code, Severity.MAJOR, recheck.message.en, recheck.message.da)

    for code, text in cross_field_notes(answers):
        collector.issue(code, Severity.MINOR, text.en, text.da)

    if answers.totalArea and not collector.violations:
        minimum = min_area(answers.bedrooms, answers.bathrooms)
        collector.check(
            "WIZARD-area-min",
            f"{js_number(answers.totalArea)}m² ≥ {minimum}m² minimum ✓",
            f"{js_number(answers.totalArea)}m² ≥ {minimum}m² minimum ✓",
        )

    return collector.report()


__all__ = [
    "WizardStep",
    "StepSeverity",
    "WizardAnswers",
    "StepResult",
    "min_area",
    "max_reasonable_area",
    "cross_field_notes",
    "area_recheck",
    "cross_validate",
    "validate_step",
    "evaluate_answers",
]
