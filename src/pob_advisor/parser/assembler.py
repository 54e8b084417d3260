"""Compose the extractor outputs into a ParsedBuild, with caching.

Pipeline for a cache miss:

    build code -> decode_build_code -> parse_document -> check_version
               -> five section extractors -> assemble_build

A cache hit returns the stored ParsedBuild without decoding anything.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime, timezone

from pob_advisor.cache.build_cache import BuildCache
from pob_advisor.data.reference import default_keystone_table, load_keystone_table
from pob_advisor.engine.config import AdvisorConfig
from pob_advisor.models.build import Keystone, ParsedBuild, content_hash
from pob_advisor.parser.build_code import decode_build_code
from pob_advisor.parser.character_parser import parse_character
from pob_advisor.parser.document import BuildDocument, check_version, parse_document
from pob_advisor.parser.gear_parser import parse_gear
from pob_advisor.parser.passive_parser import parse_passives
from pob_advisor.parser.skill_parser import parse_skills
from pob_advisor.parser.stats_parser import parse_stats


logger = logging.getLogger(__name__)


def _gear_section(document: BuildDocument):
    section = document.section("Gear")
    return section if section is not None else document.section("Items")


def assemble_build(
    code: str,
    document: BuildDocument,
    version: str,
    keystones: Mapping[str, Keystone],
) -> ParsedBuild:
    return ParsedBuild(
        build_id=content_hash(code),
        version=version,
        game_version=document.game_version,
        character=parse_character(document.section("Build")),
        skills=tuple(parse_skills(document.section("Skills"))),
        passives=parse_passives(document.section("Tree"), keystones),
        gear=tuple(parse_gear(_gear_section(document))),
        stats=tuple(parse_stats(document.section("Stats"))),
        parsed_at=datetime.now(timezone.utc).isoformat(),
    )


class BuildPipeline:
    """Decode build codes into ParsedBuilds, memoized in a BuildCache."""

    __slots__ = ("config", "cache", "keystones")

    def __init__(
        self,
        config: AdvisorConfig | None = None,
        *,
        cache: BuildCache | None = None,
        keystones: Mapping[str, Keystone] | None = None,
    ) -> None:
        self.config = config or AdvisorConfig()
        self.cache = cache or BuildCache(
            max_size=self.config.cache_size,
            ttl_seconds=self.config.cache_ttl_seconds,
        )
        if keystones is None:
            if self.config.keystones_path is not None:
                keystones = load_keystone_table(self.config.keystones_path)
            else:
                keystones = default_keystone_table()
        self.keystones = keystones

    def parse(self, code: str) -> ParsedBuild:
        cached = self.cache.lookup(code)
        if cached is not None:
            logger.debug("Cache hit for build %s", cached.build_id[:12])
            return cached

        document = parse_document(decode_build_code(code))
        version = check_version(document, self.config.min_pob_version)
        build = assemble_build(code, document, version, self.keystones)
        self.cache.store(code, build)
        logger.info(
            "Parsed build %s (PoB %s, %s level %d, %d skills, %d passives)",
            build.build_id[:12],
            build.version,
            build.character.class_name,
            build.character.level,
            len(build.skills),
            build.passives.total_points,
        )
        return build
