"""
Genshin Calc - Characters
=========================
Per-character kits: skill instances, talent effects and damage formulas.

Each kit is selected from CHARACTER_TABLE by CharacterName. A kit knows:
- Its skill instances (an Enum with element and skill type per member)
- Its character config (toggles that register attribute edges)
- Its skill config (toggles that change a single damage evaluation)
- How to turn a skill instance into damage builder terms

Config objects of the wrong character are replaced by the kit default
with a warning, so bulk evaluation never aborts on a bad toggle.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Tuple, Type

from .core.attribute import AttributeGraph
from .core.constants import (
    AttributeName,
    Element,
    SkillType,
    MAX_CONSTELLATION,
    SKILL_LEVEL_COUNT,
    get_level_breakpoint_index,
    interpolate_level_curve,
)
from .core.damage import DamageBuilder, DamageResult
from .core.enemy import Enemy, EnemyResolver
from .core.exceptions import SkillLevelError
from .item_config import ItemConfig, bool_config, config_from_dict
from .skill_tables import (
    ASCENSION_STAT_FRACTION,
    INEFFA_SKILL,
    INEFFA_STATIC_DATA,
    KLEE_SKILL,
    KLEE_STATIC_DATA,
    CharacterName,
    CharacterStaticData,
)
from .stat_names import StatName

logger = logging.getLogger(__name__)


STATIC_DATA: Dict[CharacterName, CharacterStaticData] = {
    CharacterName.INEFFA: INEFFA_STATIC_DATA,
    CharacterName.KLEE: KLEE_STATIC_DATA,
}


# =============================================================================
# COMMON DATA
# =============================================================================

@dataclass
class CharacterCommonData:
    """
    Level, ascension, constellation and talent levels of one character.

    Talent levels are the 1-15 values shown in game before constellation
    boosts. Level must be 1-90 and constellation 0-6.
    """
    name: CharacterName
    level: int = 90
    ascended: bool = False
    constellation: int = 0
    skill1: int = 10
    skill2: int = 10
    skill3: int = 10

    def __post_init__(self):
        # Raises ValueError on a level outside 1-90
        get_level_breakpoint_index(self.level, self.ascended)
        if not 0 <= self.constellation <= MAX_CONSTELLATION:
            raise ValueError(f"Constellation must be 0-{MAX_CONSTELLATION}, got {self.constellation}")

    @property
    def static_data(self) -> CharacterStaticData:
        return STATIC_DATA[self.name]

    @property
    def base_hp(self) -> float:
        return interpolate_level_curve(self.static_data.hp, self.level, self.ascended)

    @property
    def base_atk(self) -> float:
        return interpolate_level_curve(self.static_data.atk, self.level, self.ascended)

    @property
    def base_def(self) -> float:
        return interpolate_level_curve(self.static_data.def_, self.level, self.ascended)

    def ascension_stat(self) -> Tuple[StatName, float]:
        """Ascension sub stat and its value at the current level."""
        index = get_level_breakpoint_index(self.level, self.ascended)
        static = self.static_data
        return static.sub_stat, static.sub_stat_max * ASCENSION_STAT_FRACTION[index]

    def get_3_skill(self) -> Tuple[int, int, int]:
        """
        0-based table indices of the three talents after constellation boosts.

        C3 and C5 each add 3 levels to one talent.

        Raises:
            SkillLevelError: if any index falls outside the 15-entry tables
        """
        static = self.static_data
        levels = [self.skill1, self.skill2, self.skill3]
        if self.constellation >= 3:
            levels[static.c3_boost.value] += 3
        if self.constellation >= 5:
            levels[static.c5_boost.value] += 3

        indices = tuple(level - 1 for level in levels)
        for index in indices:
            if not 0 <= index < SKILL_LEVEL_COUNT:
                raise SkillLevelError(index, SKILL_LEVEL_COUNT)
        return indices


@dataclass
class DamageContext:
    """Everything a skill damage evaluation reads."""
    character_common_data: CharacterCommonData
    attribute: AttributeGraph
    enemy: Enemy
    resolver: Optional[EnemyResolver] = None


# =============================================================================
# KIT BASE
# =============================================================================

class CharacterKit:
    """
    Behaviour shared by every character kit.

    Subclasses set the class attributes and implement add_damage_terms().
    """
    STATIC_DATA: CharacterStaticData
    DAMAGE_ENUM: Type[Enum]
    CONFIG_CLASS: Type
    SKILL_CONFIG_CLASS: Type
    CONFIG_DATA: Tuple[ItemConfig, ...] = ()
    CONFIG_SKILL: Tuple[ItemConfig, ...] = ()

    @property
    def name(self) -> CharacterName:
        return self.STATIC_DATA.name

    def _resolve(self, config: Any, config_class: Type, items: Sequence[ItemConfig], kind: str):
        if config is None:
            return config_class()
        if isinstance(config, config_class):
            return config
        if isinstance(config, dict):
            return config_class(**config_from_dict(items, config))
        logger.warning(
            "%s %s expected %s, got %s; using defaults",
            self.name.value, kind, config_class.__name__, type(config).__name__,
        )
        return config_class()

    def resolve_config(self, config: Any = None):
        """Character config for this kit. Accepts the dataclass, a loose dict or None."""
        return self._resolve(config, self.CONFIG_CLASS, self.CONFIG_DATA, "config")

    def resolve_skill_config(self, config: Any = None):
        """Skill config for this kit. Accepts the dataclass, a loose dict or None."""
        return self._resolve(config, self.SKILL_CONFIG_CLASS, self.CONFIG_SKILL, "skill config")

    def apply_effect(self, graph: AttributeGraph, common_data: CharacterCommonData, config: Any = None) -> None:
        """Register talent and constellation effects on the attribute graph."""

    def add_damage_terms(
        self,
        builder: DamageBuilder,
        skill: Enum,
        skill_indices: Tuple[int, int, int],
        common_data: CharacterCommonData,
        skill_config: Any,
    ) -> None:
        raise NotImplementedError

    def damage(
        self,
        context: DamageContext,
        skill: Enum,
        skill_config: Any = None,
        override_element: Optional[Element] = None,
    ) -> DamageResult:
        """
        Damage of one skill instance.

        Args:
            context: Resolved attributes, character data and enemy
            skill: Member of this kit's DAMAGE_ENUM
            skill_config: Skill toggles; None or a mismatched config uses defaults
            override_element: Infusion element for physical attacks

        Returns:
            DamageResult with expectation and attribute gradient
        """
        if not isinstance(skill, self.DAMAGE_ENUM):
            raise ValueError(f"{skill!r} is not a {self.name.value} skill")

        skill_config = self.resolve_skill_config(skill_config)
        common_data = context.character_common_data
        builder = DamageBuilder()
        self.add_damage_terms(builder, skill, common_data.get_3_skill(), common_data, skill_config)
        return builder.damage(
            context.attribute,
            context.enemy,
            skill.element,
            skill.skill_type,
            common_data.level,
            override_element,
            context.resolver,
        )


# =============================================================================
# INEFFA
# =============================================================================

class IneffaDamage(Enum):
    NORMAL1 = "normal1"
    NORMAL2 = "normal2"
    NORMAL3 = "normal3"
    NORMAL4 = "normal4"
    CHARGED = "charged"
    PLUNGING1 = "plunging1"
    PLUNGING2 = "plunging2"
    PLUNGING3 = "plunging3"
    SKILL = "skill"
    BURST = "burst"

    @property
    def element(self) -> Element:
        if self in (IneffaDamage.SKILL, IneffaDamage.BURST):
            return Element.ELECTRO
        return Element.PHYSICAL

    @property
    def skill_type(self) -> SkillType:
        return _INEFFA_SKILL_TYPES[self]


_INEFFA_SKILL_TYPES: Dict[IneffaDamage, SkillType] = {
    IneffaDamage.NORMAL1: SkillType.NORMAL_ATTACK,
    IneffaDamage.NORMAL2: SkillType.NORMAL_ATTACK,
    IneffaDamage.NORMAL3: SkillType.NORMAL_ATTACK,
    IneffaDamage.NORMAL4: SkillType.NORMAL_ATTACK,
    IneffaDamage.CHARGED: SkillType.CHARGED_ATTACK,
    IneffaDamage.PLUNGING1: SkillType.PLUNGING_ATTACK_IN_ACTION,
    IneffaDamage.PLUNGING2: SkillType.PLUNGING_ATTACK_ON_GROUND,
    IneffaDamage.PLUNGING3: SkillType.PLUNGING_ATTACK_ON_GROUND,
    IneffaDamage.SKILL: SkillType.ELEMENTAL_SKILL,
    IneffaDamage.BURST: SkillType.ELEMENTAL_BURST,
}


@dataclass(frozen=True)
class IneffaConfig:
    em_bonus_active: bool = True


@dataclass(frozen=True)
class IneffaSkillConfig:
    overclocking_active: bool = True


# A4: Elemental Mastery from 6% of ATK
INEFFA_EM_FROM_ATK = 0.06
# A1: Birgitta's extra discharge, 65% ATK as Electro
INEFFA_OVERCLOCKING_RATIO = 0.65


class Ineffa(CharacterKit):
    STATIC_DATA = INEFFA_STATIC_DATA
    DAMAGE_ENUM = IneffaDamage
    CONFIG_CLASS = IneffaConfig
    SKILL_CONFIG_CLASS = IneffaSkillConfig
    CONFIG_DATA = (bool_config("em_bonus_active", "Parameter Permutation Active"),)
    CONFIG_SKILL = (bool_config("overclocking_active", "Overclocking Circuit Active"),)

    def apply_effect(self, graph, common_data, config=None):
        config = self.resolve_config(config)
        if config.em_bonus_active:
            graph.add_linear_edge(
                AttributeName.ATK,
                AttributeName.ELEMENTAL_MASTERY,
                INEFFA_EM_FROM_ATK,
                "Ineffa: Parameter Permutation",
            )

    def add_damage_terms(self, builder, skill, skill_indices, common_data, skill_config):
        s1, s2, s3 = skill_indices
        table = {
            IneffaDamage.NORMAL1: INEFFA_SKILL.normal_dmg1[s1],
            IneffaDamage.NORMAL2: INEFFA_SKILL.normal_dmg2[s1],
            IneffaDamage.NORMAL3: INEFFA_SKILL.normal_dmg3[s1],
            IneffaDamage.NORMAL4: INEFFA_SKILL.normal_dmg4[s1],
            IneffaDamage.CHARGED: INEFFA_SKILL.charged_dmg[s1],
            IneffaDamage.PLUNGING1: INEFFA_SKILL.plunging_dmg1[s1],
            IneffaDamage.PLUNGING2: INEFFA_SKILL.plunging_dmg2[s1],
            IneffaDamage.PLUNGING3: INEFFA_SKILL.plunging_dmg3[s1],
            IneffaDamage.SKILL: INEFFA_SKILL.elemental_skill_dmg[s2],
            IneffaDamage.BURST: INEFFA_SKILL.elemental_burst_dmg[s3],
        }
        builder.add_atk_ratio("Skill ratio", table[skill])

        if skill_config.overclocking_active and skill == IneffaDamage.SKILL:
            builder.add_atk_ratio("Overclocking Circuit", INEFFA_OVERCLOCKING_RATIO)


# =============================================================================
# KLEE
# =============================================================================

class KleeDamage(Enum):
    NORMAL1 = "normal1"
    NORMAL2 = "normal2"
    NORMAL3 = "normal3"
    CHARGED = "charged"
    SKILL_BOMB = "skill_bomb"
    SKILL_MINE = "skill_mine"
    BURST = "burst"

    @property
    def element(self) -> Element:
        return Element.PYRO

    @property
    def skill_type(self) -> SkillType:
        if self in (KleeDamage.NORMAL1, KleeDamage.NORMAL2, KleeDamage.NORMAL3):
            return SkillType.NORMAL_ATTACK
        if self == KleeDamage.CHARGED:
            return SkillType.CHARGED_ATTACK
        if self == KleeDamage.BURST:
            return SkillType.ELEMENTAL_BURST
        return SkillType.ELEMENTAL_SKILL


@dataclass(frozen=True)
class KleeConfig:
    c6_pyro_bonus_active: bool = True


@dataclass(frozen=True)
class KleeSkillConfig:
    explosive_spark: bool = True
    c2_def_minus_active: bool = True


KLEE_EXPLOSIVE_SPARK_BONUS = 0.5
KLEE_C2_DEF_MINUS = 0.23
KLEE_C6_PYRO_BONUS = 0.1


class Klee(CharacterKit):
    STATIC_DATA = KLEE_STATIC_DATA
    DAMAGE_ENUM = KleeDamage
    CONFIG_CLASS = KleeConfig
    SKILL_CONFIG_CLASS = KleeSkillConfig
    CONFIG_DATA = (bool_config("c6_pyro_bonus_active", "C6: Blazing Delight Active"),)
    CONFIG_SKILL = (
        bool_config("explosive_spark", "Explosive Spark"),
        bool_config("c2_def_minus_active", "C2: Explosive Frags Active"),
    )

    def apply_effect(self, graph, common_data, config=None):
        config = self.resolve_config(config)
        if common_data.constellation >= 6 and config.c6_pyro_bonus_active:
            graph.add_flat(AttributeName.BONUS_PYRO, KLEE_C6_PYRO_BONUS)

    def add_damage_terms(self, builder, skill, skill_indices, common_data, skill_config):
        s1, s2, s3 = skill_indices
        table = {
            KleeDamage.NORMAL1: KLEE_SKILL.normal_dmg1[s1],
            KleeDamage.NORMAL2: KLEE_SKILL.normal_dmg2[s1],
            KleeDamage.NORMAL3: KLEE_SKILL.normal_dmg3[s1],
            KleeDamage.CHARGED: KLEE_SKILL.charged_dmg[s1],
            KleeDamage.SKILL_BOMB: KLEE_SKILL.elemental_skill_dmg1[s2],
            KleeDamage.SKILL_MINE: KLEE_SKILL.elemental_skill_dmg2[s2],
            KleeDamage.BURST: KLEE_SKILL.elemental_burst_dmg[s3],
        }
        builder.add_atk_ratio("Skill ratio", table[skill])

        if skill_config.explosive_spark and skill == KleeDamage.CHARGED:
            builder.add_extra_bonus("Explosive Spark", KLEE_EXPLOSIVE_SPARK_BONUS)
        # Assumes the mines have already hit the enemy
        if skill_config.c2_def_minus_active and common_data.constellation >= 2:
            builder.add_extra_def_minus("C2: Explosive Frags", KLEE_C2_DEF_MINUS)


# =============================================================================
# REGISTRY
# =============================================================================

CHARACTER_TABLE: Dict[CharacterName, CharacterKit] = {
    CharacterName.INEFFA: Ineffa(),
    CharacterName.KLEE: Klee(),
}


def get_character_kit(name: CharacterName) -> CharacterKit:
    return CHARACTER_TABLE[name]


@dataclass
class Character:
    """A character as equipped in one build: common data plus its config."""
    common_data: CharacterCommonData
    config: Any = None

    @property
    def kit(self) -> CharacterKit:
        return CHARACTER_TABLE[self.common_data.name]

    @property
    def name(self) -> CharacterName:
        return self.common_data.name

    def apply_effect(self, graph: AttributeGraph) -> None:
        self.kit.apply_effect(graph, self.common_data, self.config)


__all__ = [
    'STATIC_DATA',
    'CharacterCommonData',
    'DamageContext',
    'CharacterKit',
    'IneffaDamage',
    'IneffaConfig',
    'IneffaSkillConfig',
    'Ineffa',
    'KleeDamage',
    'KleeConfig',
    'KleeSkillConfig',
    'Klee',
    'CHARACTER_TABLE',
    'get_character_kit',
    'Character',
]
