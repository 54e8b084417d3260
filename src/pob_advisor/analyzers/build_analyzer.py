"""Run every classifier and detector over a build and combine the results.

``analyze_build`` returns the compact ``BuildAnalysis`` the service hands
out; ``build_report`` keeps the detailed per-analyzer evidence for the
command line report.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from pob_advisor.analyzers.defensive import DefensiveAnalysis, analyze_defense
from pob_advisor.analyzers.offensive import OffensiveAnalysis, analyze_offense
from pob_advisor.analyzers.playstyle import PlaystyleDetection, detect_playstyle
from pob_advisor.analyzers.stat_lookup import estimate_missing_stats
from pob_advisor.analyzers.strengths import StrengthDetection, detect_strengths
from pob_advisor.analyzers.weaknesses import WeaknessDetection, detect_weaknesses
from pob_advisor.models.analysis import BuildAnalysis
from pob_advisor.models.build import ParsedBuild


@dataclass(slots=True)
class BuildReport:
    build: ParsedBuild              # with estimated stats filled in
    defense: DefensiveAnalysis
    offense: OffensiveAnalysis
    playstyle: PlaystyleDetection
    strengths: StrengthDetection
    weaknesses: WeaknessDetection

    def to_analysis(self, analyzed_at: str | None = None) -> BuildAnalysis:
        return BuildAnalysis(
            strengths=tuple(self.strengths.strengths),
            weaknesses=tuple(self.weaknesses.weaknesses),
            playstyle_type=self.playstyle.type,
            defensive_rating=self.defense.rating,
            offensive_rating=self.offense.rating,
            analyzed_at=analyzed_at or datetime.now(timezone.utc).isoformat(),
        )


def build_report(build: ParsedBuild) -> BuildReport:
    estimated = estimate_missing_stats(build)
    return BuildReport(
        build=estimated,
        defense=analyze_defense(estimated),
        offense=analyze_offense(estimated),
        playstyle=detect_playstyle(estimated),
        strengths=detect_strengths(estimated),
        weaknesses=detect_weaknesses(estimated),
    )


def analyze_build(build: ParsedBuild, analyzed_at: str | None = None) -> BuildAnalysis:
    return build_report(build).to_analysis(analyzed_at)
