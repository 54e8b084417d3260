"""Decode a Path of Building build code and print what was extracted.

Usage:
    python -m scripts.parse_build --code eNrtW...
    python -m scripts.parse_build --file build.txt [--json]
    pbpaste | python -m scripts.parse_build

Exits non-zero with the error code and message if the build code is
rejected.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pob_advisor.engine.config import AdvisorConfig
from pob_advisor.models.build import ParsedBuild
from pob_advisor.models.errors import BuildCodeError
from pob_advisor.parser.assembler import BuildPipeline
from pob_advisor.service.payloads import build_payload


def _read_code(raw: str | None, file_path: Path | None) -> str:
    if raw is not None:
        return raw
    if file_path is not None:
        return file_path.read_text(encoding="utf-8")
    return sys.stdin.read()


def _render_build(build: ParsedBuild) -> list[str]:
    character = build.character
    title = character.class_name
    if character.ascendancy:
        title = f"{character.ascendancy} ({character.class_name})"
    lines = [
        f"Build {build.build_id[:12]}  PoB {build.version}  game {build.game_version}",
        f"{title}, level {character.level}" + (f", {character.league}" if character.league else ""),
        "",
        f"Skills ({len(build.skills)}):",
    ]
    for skill in build.skills:
        marker = "*" if skill.is_main_skill else " "
        supports = ", ".join(s.name for s in skill.supports) or "-"
        lines.append(
            f" {marker} {skill.skill_name} L{skill.gem_level}/Q{skill.quality} "
            f"[{skill.link_count}L] {supports}"
        )

    passives = build.passives
    keystones = ", ".join(k.name for k in passives.keystones) or "none"
    lines += [
        "",
        f"Passives: {passives.total_points} points (tree {passives.tree_version}), keystones: {keystones}",
        "",
        "Gear:",
    ]
    for slot in build.gear:
        if slot.is_empty:
            lines.append(f"  {slot.slot:<10} -")
            continue
        base = f" ({slot.base_type})" if slot.base_type and slot.base_type != slot.item_name else ""
        lines.append(f"  {slot.slot:<10} {slot.item_name}{base}, {len(slot.affixes)} affixes")

    lines += ["", "Stats:"]
    for stat in build.stats:
        suffix = "" if stat.source == "explicit" else f" ({stat.source})"
        lines.append(f"  {stat.name}: {stat.value:g}{suffix}")
    return lines


def main() -> None:
    parser = argparse.ArgumentParser(description="Decode a Path of Building build code")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--code", type=str, help="Build code string.")
    source.add_argument("--file", type=Path, help="File containing a build code.")
    parser.add_argument("--json", action="store_true", help="Emit the parsed build as JSON.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    pipeline = BuildPipeline(AdvisorConfig.from_env())
    try:
        build = pipeline.parse(_read_code(args.code, args.file))
    except BuildCodeError as exc:
        print(f"Error [{exc.code}]: {exc.message}", file=sys.stderr)
        if exc.details:
            print(f"  {exc.details}", file=sys.stderr)
        raise SystemExit(1) from None

    if args.json:
        print(json.dumps(build_payload(build), indent=2))
    else:
        print("\n".join(_render_build(build)))


if __name__ == "__main__":
    main()
