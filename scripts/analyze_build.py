"""Rate a build and list suggested improvements.

Usage:
    python -m scripts.analyze_build --file build.txt
    python -m scripts.analyze_build --code eNrtW... --json
    python -m scripts.analyze_build --file build.txt --no-suggestions

The text report includes the evidence behind each rating; ``--json``
prints the same ``analysis`` and ``suggestions`` payloads the HTTP API
returns.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pob_advisor.analyzers.build_analyzer import BuildReport, build_report
from pob_advisor.engine.config import AdvisorConfig
from pob_advisor.models.analysis import Suggestion
from pob_advisor.models.errors import BuildCodeError
from pob_advisor.parser.assembler import BuildPipeline
from pob_advisor.service.payloads import analysis_payload, suggestion_payload
from pob_advisor.suggesters.aggregator import suggest_improvements


PRIORITY_LABELS = {"critical": "!!", "important": "! ", "optional": "  "}


def _read_code(raw: str | None, file_path: Path | None) -> str:
    if raw is not None:
        return raw
    if file_path is not None:
        return file_path.read_text(encoding="utf-8")
    return sys.stdin.read()


def _section(title: str, entries: list[str]) -> list[str]:
    lines = [title]
    lines.extend(f"  - {entry}" for entry in entries)
    lines.append("")
    return lines


def _render_report(report: BuildReport) -> list[str]:
    playstyle = report.playstyle
    lines = [
        f"Defense: {report.defense.rating} (effective life {report.defense.effective_life:g})",
        f"Offense: {report.offense.rating} ({report.offense.damage_type}, "
        f"~{report.offense.estimated_dps} DPS)",
        f"Playstyle: {playstyle.type} (confidence {playstyle.confidence:.0%}, "
        f"clear {playstyle.clear_score:.1f} / boss {playstyle.boss_score:.1f})",
        "",
    ]
    lines += _section("Defensive details:", report.defense.details)
    lines += _section("Offensive details:", report.offense.details)
    lines += _section("Playstyle:", playstyle.reasoning + playstyle.indicators)
    lines += _section("Strengths:", report.strengths.strengths or ["none detected"])
    lines += _section("Weaknesses:", report.weaknesses.weaknesses)
    return lines


def _render_suggestions(suggestions: list[Suggestion]) -> list[str]:
    lines = [f"Suggestions ({len(suggestions)}):"]
    for s in suggestions:
        lines.append(f" {PRIORITY_LABELS.get(s.priority, '  ')} [{s.category}] {s.description}")
        lines.append(f"      -> {s.specific_action}")
        lines.append(f"      {s.expected_impact}")
    return lines


def main() -> None:
    parser = argparse.ArgumentParser(description="Analyze a Path of Building build code")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--code", type=str, help="Build code string.")
    source.add_argument("--file", type=Path, help="File containing a build code.")
    parser.add_argument("--json", action="store_true", help="Emit machine-readable JSON output.")
    parser.add_argument("--no-suggestions", action="store_true", help="Only rate the build.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = AdvisorConfig.from_env()
    try:
        build = BuildPipeline(config).parse(_read_code(args.code, args.file))
    except BuildCodeError as exc:
        print(f"Error [{exc.code}]: {exc.message}", file=sys.stderr)
        raise SystemExit(1) from None

    report = build_report(build)
    analysis = report.to_analysis()
    suggestions = []
    if not args.no_suggestions:
        suggestions = suggest_improvements(build, analysis, config.max_suggestions_per_category)

    if args.json:
        payload = {"analysis": analysis_payload(analysis)}
        if not args.no_suggestions:
            payload["suggestions"] = [suggestion_payload(s) for s in suggestions]
        print(json.dumps(payload, indent=2))
        return

    lines = _render_report(report)
    if not args.no_suggestions:
        lines += _render_suggestions(suggestions)
    print("\n".join(lines))


if __name__ == "__main__":
    main()
