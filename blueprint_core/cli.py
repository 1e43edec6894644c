"""Command line entry point: validate, export and migrate blueprint files."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

import pydantic
from loguru import logger

from .compliance.engine import evaluate
from .compliance.report import ComplianceReport, badge
from .compliance.wizard import StepSeverity, WizardAnswers, WizardStep, validate_step
from .exceptions import BlueprintError
from .export.dxf import DXFOptions, default_filename, serialize
from .export.svg_migration import convert_to_svg_blueprint
from .logging_config import setup_logging
from .model.schema import BlueprintData
from .settings import Settings

EXIT_OK = 0
EXIT_VIOLATIONS = 1
EXIT_ERROR = 2


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise BlueprintError(f"Input file not found: {path}", {"path": str(path)}) from exc
    except json.JSONDecodeError as exc:
        raise BlueprintError(f"Invalid JSON in {path}: {exc}", {"path": str(path)}) from exc


def _load_blueprint(path: Path) -> BlueprintData:
    return BlueprintData.model_validate(_read_json(path))


def _emit(payload: Any, output: Optional[Path] = None) -> None:
    text = json.dumps(payload, indent=2, ensure_ascii=False)
    if output is None:
        print(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text + "\n", encoding="utf-8")
    logger.info(f"Wrote {output}")


def _log_report(report: ComplianceReport, language: str) -> None:
    logger.info(f"Compliance: {badge(report)}")
    for item in report.violations:
        logger.warning(f"[{item.code}] {item.message.get(language)}")


def _cmd_validate(args: argparse.Namespace, settings: Settings) -> int:
    blueprint = _load_blueprint(args.plan)
    report = evaluate(blueprint, sheet_index=args.sheet, settings=settings)
    _log_report(report, settings.compliance.language)
    _emit(report.to_payload(), args.output)
    return EXIT_OK if report.passing else EXIT_VIOLATIONS


def _cmd_export_dxf(args: argparse.Namespace, settings: Settings) -> int:
    blueprint = _load_blueprint(args.plan)
    options = DXFOptions(issue_date=settings.export.issue_date, strict=settings.openings.strict)
    payload = serialize(blueprint, args.sheet, options, encoding=settings.export.encoding)
    output = args.output or Path(default_filename(blueprint, args.sheet))
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(payload)
    logger.info(f"Exported sheet {args.sheet} to {output} ({len(payload)} bytes)")
    return EXIT_OK


def _cmd_migrate(args: argparse.Namespace, settings: Settings) -> int:
    blueprint = _load_blueprint(args.plan)
    result = convert_to_svg_blueprint(
        blueprint,
        args.sheet,
        tolerance=settings.topology.loop_tolerance,
        connection_tolerance=settings.topology.connection_tolerance,
    )
    _emit(result.model_dump(mode="json"), args.output)
    return EXIT_OK


def _cmd_check_answers(args: argparse.Namespace, settings: Settings) -> int:
    answers = WizardAnswers.model_validate(_read_json(args.answers))
    language = settings.compliance.language
    if args.step:
        result = validate_step(args.step, answers)
        if result.message is not None:
            logger.info(f"{args.step}: {result.message.get(language)}")
        _emit(result.model_dump(mode="json"), args.output)
        return EXIT_VIOLATIONS if result.severity == StepSeverity.ERROR else EXIT_OK

    report = evaluate(answers, settings=settings)
    _log_report(report, language)
    _emit(report.to_payload(), args.output)
    return EXIT_OK if report.passing else EXIT_VIOLATIONS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blueprint-core",
        description="Check BR18/BR23 compliance, export DXF and migrate blueprint plans",
    )
    parser.add_argument("--config", type=Path, help="YAML configuration file (default: $BLUEPRINT_CONFIG or config/default.yaml)")
    parser.add_argument("--log-level", help="Override the configured log level")
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON lines")
    sub = parser.add_subparsers(dest="command", required=True)

    validate = sub.add_parser("validate", help="Run compliance checks on a plan")
    validate.add_argument("plan", type=Path, help="Blueprint JSON file")
    validate.add_argument("--sheet", type=int, default=0, help="Sheet index (default: 0)")
    validate.add_argument("--output", type=Path, help="Write the report here instead of stdout")
    validate.set_defaults(handler=_cmd_validate)

    export = sub.add_parser("export-dxf", help="Export one sheet as DXF R12")
    export.add_argument("plan", type=Path, help="Blueprint JSON file")
    export.add_argument("--sheet", type=int, default=0, help="Sheet index (default: 0)")
    export.add_argument("--output", type=Path, help="Output file (default: <sheet>_<project>.dxf)")
    export.set_defaults(handler=_cmd_export_dxf)

    migrate = sub.add_parser("migrate", help="Convert a plan to the SVG blueprint format")
    migrate.add_argument("plan", type=Path, help="Blueprint JSON file")
    migrate.add_argument("--sheet", type=int, default=0, help="Sheet index (default: 0)")
    migrate.add_argument("--output", type=Path, help="Write the SVG blueprint here instead of stdout")
    migrate.set_defaults(handler=_cmd_migrate)

    answers = sub.add_parser("check-answers", help="Validate wizard answers")
    answers.add_argument("answers", type=Path, help="Wizard answers JSON file")
    answers.add_argument("--step", choices=[step.value for step in WizardStep], help="Validate a single step")
    answers.add_argument("--output", type=Path, help="Write the result here instead of stdout")
    answers.set_defaults(handler=_cmd_check_answers)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = Settings.load(args.config)
    except BlueprintError as exc:
        setup_logging(level="ERROR")
        logger.error(exc.message)
        return EXIT_ERROR

    setup_logging(
        level=(args.log_level or settings.logging.level).upper(),
        json_format=args.json_logs or settings.logging.json_format,
        log_file=settings.logging.log_file,
    )

    try:
        return args.handler(args, settings)
    except pydantic.ValidationError as exc:
        logger.error(f"Invalid input: {exc}")
        return EXIT_ERROR
    except BlueprintError as exc:
        logger.error(f"{type(exc).__name__}: {exc.message}")
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
