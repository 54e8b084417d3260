"""Build rating and finding interfaces."""

from pob_advisor.analyzers.build_analyzer import BuildReport, analyze_build, build_report

__all__ = [
    "BuildReport",
    "analyze_build",
    "build_report",
]
