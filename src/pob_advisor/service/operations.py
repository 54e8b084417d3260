"""The three public operations: parse, analyze and suggest.

Each returns a JSON-ready dict, ``{"success": True, ...}`` on success and
``{"success": False, "error": {"code", "message", "details"}}`` on
failure. Nothing raises out of these methods.
"""

from __future__ import annotations

import logging
import traceback
from typing import Any

from pob_advisor.analyzers.build_analyzer import analyze_build
from pob_advisor.engine.config import AdvisorConfig
from pob_advisor.models.errors import BuildCodeError, ErrorCode
from pob_advisor.parser.assembler import BuildPipeline
from pob_advisor.service.payloads import (
    analysis_from_payload,
    analysis_payload,
    build_from_payload,
    build_payload,
    suggestion_payload,
)
from pob_advisor.suggesters.aggregator import suggest_improvements


logger = logging.getLogger(__name__)


def failure(error: BuildCodeError) -> dict[str, Any]:
    return {"success": False, "error": error.to_dict()}


def _unexpected(code: ErrorCode, context: str, exc: Exception) -> dict[str, Any]:
    logger.exception("%s failed unexpectedly", context)
    details = "".join(traceback.format_exception_only(type(exc), exc)).strip()
    return failure(BuildCodeError(code, f"{context}: {exc}", details))


class AdvisorService:
    """Stateless apart from the build cache held by its pipeline."""

    def __init__(
        self,
        config: AdvisorConfig | None = None,
        *,
        pipeline: BuildPipeline | None = None,
    ) -> None:
        self.config = config or AdvisorConfig()
        self.pipeline = pipeline or BuildPipeline(self.config)

    def parse(self, build_code: Any) -> dict[str, Any]:
        if not isinstance(build_code, str):
            return failure(BuildCodeError(
                ErrorCode.MISSING_REQUIRED_FIELD,
                "buildCode must be a string",
                f"got {type(build_code).__name__}",
            ))
        try:
            build = self.pipeline.parse(build_code)
        except BuildCodeError as exc:
            logger.info("Rejected build code: %s (%s)", exc.message, exc.code)
            return failure(exc)
        except Exception as exc:
            return _unexpected(ErrorCode.MALFORMED_STRUCTURE, "Failed to parse build code", exc)
        return {"success": True, "build": build_payload(build)}

    def analyze(self, build: Any) -> dict[str, Any]:
        try:
            parsed = build_from_payload(build)
            analysis = analyze_build(parsed)
        except BuildCodeError as exc:
            return failure(exc)
        except Exception as exc:
            return _unexpected(ErrorCode.MISSING_REQUIRED_FIELD, "Failed to analyze build", exc)
        return {"success": True, "analysis": analysis_payload(analysis)}

    def suggest(self, build: Any, analysis: Any) -> dict[str, Any]:
        try:
            parsed = build_from_payload(build)
            findings = analysis_from_payload(analysis)
            suggestions = suggest_improvements(
                parsed, findings, self.config.max_suggestions_per_category
            )
        except BuildCodeError as exc:
            return failure(exc)
        except Exception as exc:
            return _unexpected(ErrorCode.MISSING_REQUIRED_FIELD, "Failed to generate suggestions", exc)
        return {"success": True, "suggestions": [suggestion_payload(s) for s in suggestions]}

    def cache_stats(self) -> dict[str, Any]:
        return {"success": True, "cache": self.pipeline.cache.stats().to_dict()}

    def clear_cache(self) -> dict[str, Any]:
        self.pipeline.cache.invalidate_all()
        return self.cache_stats()
