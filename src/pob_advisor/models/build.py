"""Parsed build aggregate and its parts.

A ``ParsedBuild`` is produced once per unique build code and is read-only
afterwards; the cache hands the same instance to every caller, so every
model here is frozen and uses tuples for its sequences.
"""

import hashlib
from dataclasses import dataclass, field

from pob_advisor.models.gear import GearSlot


DEFAULT_CLASS = "Witch"
DEFAULT_GAME_VERSION = "3.25.0"
MIN_LEVEL = 1
MAX_LEVEL = 100

STAT_SOURCES = ("explicit", "estimated", "calculated")


def content_hash(code: str) -> str:
    """SHA-256 hex digest of a raw build code string."""
    return hashlib.sha256(code.encode("utf-8")).hexdigest()


@dataclass(frozen=True, slots=True)
class BuildCode:
    """Raw build code as received from the caller."""
    code: str

    @property
    def hash(self) -> str:
        return content_hash(self.code)


@dataclass(frozen=True, slots=True)
class Character:
    class_name: str = DEFAULT_CLASS
    ascendancy: str | None = None
    level: int = MIN_LEVEL          # clamped to [1, 100] by the extractor
    league: str | None = None


@dataclass(frozen=True, slots=True)
class SupportGem:
    name: str
    gem_level: int = 1
    quality: int = 0


@dataclass(frozen=True, slots=True)
class SkillSetup:
    id: str                         # "skill-<n>", 1-based
    skill_name: str
    gem_level: int = 1              # expected 1-20, not enforced
    quality: int = 0
    supports: tuple[SupportGem, ...] = field(default_factory=tuple)
    is_main_skill: bool = False

    @property
    def link_count(self) -> int:
        # Active gem plus its supports, whatever sockets the item declares.
        return len(self.supports) + 1


@dataclass(frozen=True, slots=True)
class Keystone:
    id: str
    name: str
    effect: str = ""


@dataclass(frozen=True, slots=True)
class Notable:
    id: str
    name: str
    effect: str = ""


@dataclass(frozen=True, slots=True)
class PassiveAllocation:
    nodes: tuple[str, ...] = field(default_factory=tuple)  # allocated node ids, document order
    keystones: tuple[Keystone, ...] = field(default_factory=tuple)
    notables: tuple[Notable, ...] = field(default_factory=tuple)  # no lookup table yet
    tree_version: str = "unknown"

    @property
    def total_points(self) -> int:
        return len(self.nodes)

    def has_keystone(self, name: str, node_id: str | None = None) -> bool:
        """True if a keystone whose name contains ``name`` (or with ``node_id``) is allocated."""
        needle = name.lower()
        return any(
            needle in k.name.lower() or (node_id is not None and k.id == node_id)
            for k in self.keystones
        )


@dataclass(frozen=True, slots=True)
class Stat:
    name: str
    value: float
    source: str = "explicit"        # explicit | estimated | calculated


@dataclass(frozen=True, slots=True)
class ParsedBuild:
    build_id: str                   # SHA-256 of the raw build code
    version: str                    # PoB source-format version, e.g. "1.4.170"
    game_version: str               # game version the build targets
    character: Character
    skills: tuple[SkillSetup, ...]
    passives: PassiveAllocation
    gear: tuple[GearSlot, ...]      # always the fifteen slots, in GEAR_SLOTS order
    stats: tuple[Stat, ...]
    parsed_at: str                  # ISO-8601 UTC

    @property
    def main_skill(self) -> SkillSetup | None:
        for skill in self.skills:
            if skill.is_main_skill:
                return skill
        return None

    def gear_slot(self, slot: str) -> GearSlot | None:
        for entry in self.gear:
            if entry.slot == slot:
                return entry
        return None
