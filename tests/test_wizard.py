"""Tests for wizard answer validation."""

import pytest

from blueprint_core.compliance.report import Severity
from blueprint_core.compliance.wizard import (
    StepSeverity,
    WizardAnswers,
    WizardStep,
    cross_validate,
    evaluate_answers,
    max_reasonable_area,
    min_area,
    validate_step,
)


@pytest.mark.parametrize(
    "bedrooms,bathrooms,expected",
    [(2, 1, 72), (3, 2, 94), (None, None, 56), (0, 0, 56)],
)
def test_min_area(bedrooms, bathrooms, expected):
    """Test the gross area heuristic, with missing counts taken as 1."""
    assert min_area(bedrooms, bathrooms) == expected


def test_max_reasonable_area():
    """Test the generous-area ceiling."""
    assert max_reasonable_area(2, 1) == pytest.approx(195.0)


def test_area_below_minimum_is_error():
    """Test the area step rejects an undersized program with a suggestion."""
    result = validate_step(WizardStep.ASK_AREA, WizardAnswers(bedrooms=3, bathrooms=2, totalArea=80))
    assert not result.isValid
    assert result.severity == StepSeverity.ERROR
    assert result.suggestedValue == 94
    assert result.code == "WIZARD-area-min"
    assert "about 94m²" in result.message.en
    assert "80m²" in result.message.en
    assert "ca. 94m²" in result.message.da


def test_area_at_minimum_passes():
    """Test the threshold itself is acceptable."""
    result = validate_step("ask_area", WizardAnswers(bedrooms=2, bathrooms=1, totalArea=72))
    assert result.isValid
    assert result.severity == StepSeverity.OK
    assert result.message is None


def test_generous_area_warns():
    """Test very large areas warn but stay valid."""
    result = validate_step("ask_area", WizardAnswers(bedrooms=2, bathrooms=1, totalArea=250.5))
    assert result.isValid
    assert result.severity == StepSeverity.WARNING
    assert result.message.en.startswith("250.5m² is quite generous for 2 bedroom(s).")


@pytest.mark.parametrize("bedrooms,severity", [(5, StepSeverity.OK), (6, StepSeverity.WARNING), (8, StepSeverity.WARNING)])
def test_bedroom_count(bedrooms, severity):
    """Test notices for many bedrooms."""
    result = validate_step("ask_bedrooms", WizardAnswers(bedrooms=bedrooms))
    assert result.severity == severity
    assert result.isValid


def test_unusual_bedroom_count_names_minimum_area():
    """Test the strongest bedroom notice quotes the area it needs."""
    result = validate_step("ask_bedrooms", WizardAnswers(bedrooms=8))
    assert f"at least {min_area(8, None)}m²" in result.message.en


def test_bathroom_ratio():
    """Test more than bedrooms + 1 bathrooms warns."""
    assert validate_step("ask_bathrooms", WizardAnswers(bedrooms=2, bathrooms=3)).severity == StepSeverity.OK
    result = validate_step("ask_bathrooms", WizardAnswers(bedrooms=2, bathrooms=4))
    assert result.severity == StepSeverity.WARNING
    assert result.message.en.startswith("4 bathrooms for 2 bedroom(s)")


@pytest.mark.parametrize("step", ["ask_floors", "ask_type", "ask_lifestyle", "ask_special", "made_up"])
def test_steps_without_rules_pass(step):
    """Test steps without checks and unknown steps always pass."""
    result = validate_step(step, WizardAnswers(bedrooms=20, bathrooms=30, totalArea=1))
    assert result.isValid
    assert result.severity == StepSeverity.OK


def test_confirm_notes_for_multi_floor_homes():
    """Test elderly and wheelchair notes are joined into one warning."""
    answers = WizardAnswers(floors=2, lifestyle=["elderly"], specialRequirements=["wheelchair_access"])
    result = cross_validate(answers)
    assert result.isValid
    assert result.severity == StepSeverity.WARNING
    assert result.code == "WIZARD-cross-field"
    paragraphs = result.message.en.split("\n\n")
    assert len(paragraphs) == 2
    assert paragraphs[0].startswith("Since there are elderly residents")
    assert paragraphs[1].startswith("Wheelchair accessibility")


def test_confirm_single_floor_has_no_notes():
    """Test lifestyle notes only apply to multi-floor homes."""
    result = cross_validate(WizardAnswers(floors=1, lifestyle=["elderly", "kids"]))
    assert result.severity == StepSeverity.OK


def test_confirm_area_recheck_wins():
    """Test the stricter area recheck takes precedence over notes."""
    answers = WizardAnswers(bedrooms=3, bathrooms=2, totalArea=80, floors=2, lifestyle=["kids"])
    result = validate_step(WizardStep.CONFIRM, answers)
    assert result.severity == StepSeverity.ERROR
    assert result.code == "WIZARD-area-recheck"
    assert result.suggestedValue == 94


def test_confirm_recheck_tolerates_ten_percent():
    """Test areas within 90% of the minimum pass the recheck."""
    answers = WizardAnswers(bedrooms=3, bathrooms=2, totalArea=85)
    assert cross_validate(answers).severity == StepSeverity.OK


def test_evaluate_answers_report():
    """Test answers are reported like a plan: errors block, notes warn."""
    answers = WizardAnswers(bedrooms=3, bathrooms=2, totalArea=60, floors=2, lifestyle=["kids"])
    report = evaluate_answers(answers)
    assert not report.passing
    assert [v.code for v in report.violations] == ["WIZARD-area-min"]
    assert report.violations[0].severity == Severity.MAJOR
    assert [w.code for w in report.warnings] == ["WIZARD-kids-floors"]


def test_evaluate_answers_passing():
    """Test a sound program passes with an area confirmation."""
    report = evaluate_answers(WizardAnswers(bedrooms=2, bathrooms=1, totalArea=110))
    assert report.passing
    assert report.warnings == []
    assert [c.code for c in report.checks] == ["WIZARD-area-min"]
    assert report.checks[0].message.en == "110m² ≥ 72m² minimum ✓"
