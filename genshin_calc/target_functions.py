"""
Genshin Calc - Target Functions
===============================
Scalar objectives that rank candidate builds.

A target function evaluates a fixed set of skill instances, weights each
expectation by how often the skill is used in a realistic rotation, and
returns the weighted sum. It also publishes optimizer hints: a per-stat
importance table and main-stat/set whitelists.

The set of target functions is closed: TARGET_FUNCTION_TABLE maps every
TargetFunctionName to its class.

Usage:
    tf = create_target_function(TargetFunctionName.INEFFA_DEFAULT, character, weapon)
    score = tf.target(graph, character, weapon, artifacts, enemy)
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type

from .artifacts import Artifact, ArtifactEffectConfig, ArtifactSetName
from .characters import (
    Character,
    CharacterCommonData,
    DamageContext,
    IneffaDamage,
    IneffaSkillConfig,
    KleeDamage,
    KleeSkillConfig,
    get_character_kit,
)
from .core.attribute import AttributeGraph, merge_gradients
from .core.constants import AttributeName
from .core.damage import DamageResult
from .core.enemy import Enemy, EnemyResolver
from .item_config import ItemConfig, float_config, config_from_dict
from .skill_tables import CharacterName
from .stat_names import StatName
from .weapons import Weapon, WeaponCommonData

logger = logging.getLogger(__name__)


class TargetFunctionName(Enum):
    INEFFA_DEFAULT = "ineffa_default"
    KLEE_DEFAULT = "klee_default"
    MAX_ATK = "max_atk"


# =============================================================================
# OPTIMIZER HINTS
# =============================================================================

DEFAULT_NORMAL_THRESHOLD = 1.0
DEFAULT_CRITICAL_THRESHOLD = 1.5
DEFAULT_VERY_CRITICAL_THRESHOLD = 2.0


@dataclass
class TargetFunctionOptConfig:
    """
    Search hints for the optimizer.

    Stat weights rank sub stats (1.0 = as important as crit rate). The
    thresholds classify a stat's weight as normal, critical or very critical.
    """
    atk_fixed: float = 0.0
    atk_percentage: float = 0.0
    hp_fixed: float = 0.0
    hp_percentage: float = 0.0
    def_fixed: float = 0.0
    def_percentage: float = 0.0
    recharge: float = 0.0
    elemental_mastery: float = 0.0
    critical: float = 0.0
    critical_damage: float = 0.0
    healing_bonus: float = 0.0
    bonus_electro: float = 0.0
    bonus_pyro: float = 0.0
    bonus_hydro: float = 0.0
    bonus_anemo: float = 0.0
    bonus_cryo: float = 0.0
    bonus_geo: float = 0.0
    bonus_dendro: float = 0.0
    bonus_physical: float = 0.0

    sand_main_stats: List[StatName] = field(default_factory=list)
    goblet_main_stats: List[StatName] = field(default_factory=list)
    head_main_stats: List[StatName] = field(default_factory=list)
    set_names: Optional[List[ArtifactSetName]] = None
    very_critical_set_names: Optional[List[ArtifactSetName]] = None

    normal_threshold: float = DEFAULT_NORMAL_THRESHOLD
    critical_threshold: float = DEFAULT_CRITICAL_THRESHOLD
    very_critical_threshold: float = DEFAULT_VERY_CRITICAL_THRESHOLD

    def stat_weights(self) -> Dict[StatName, float]:
        """Weight per StatName."""
        return {
            StatName.ATK_FIXED: self.atk_fixed,
            StatName.ATK_PERCENTAGE: self.atk_percentage,
            StatName.HP_FIXED: self.hp_fixed,
            StatName.HP_PERCENTAGE: self.hp_percentage,
            StatName.DEF_FIXED: self.def_fixed,
            StatName.DEF_PERCENTAGE: self.def_percentage,
            StatName.RECHARGE: self.recharge,
            StatName.ELEMENTAL_MASTERY: self.elemental_mastery,
            StatName.CRITICAL_RATE: self.critical,
            StatName.CRITICAL_DAMAGE: self.critical_damage,
            StatName.HEALING_BONUS: self.healing_bonus,
            StatName.ELECTRO_BONUS: self.bonus_electro,
            StatName.PYRO_BONUS: self.bonus_pyro,
            StatName.HYDRO_BONUS: self.bonus_hydro,
            StatName.ANEMO_BONUS: self.bonus_anemo,
            StatName.CRYO_BONUS: self.bonus_cryo,
            StatName.GEO_BONUS: self.bonus_geo,
            StatName.DENDRO_BONUS: self.bonus_dendro,
            StatName.PHYSICAL_BONUS: self.bonus_physical,
        }

    def classify(self, stat: StatName) -> str:
        """'very_critical', 'critical', 'normal' or 'ignored' for a stat's weight."""
        weight = self.stat_weights()[stat]
        if weight >= self.very_critical_threshold:
            return "very_critical"
        if weight >= self.critical_threshold:
            return "critical"
        if weight >= self.normal_threshold:
            return "normal"
        return "ignored"


# =============================================================================
# BASE CLASS
# =============================================================================

@dataclass(frozen=True)
class TargetValue:
    """Score and d score / d attribute (composed values, chained through edges)."""
    score: float
    gradient: Dict[AttributeName, float]


def weighted_sum(weighted: Sequence[Tuple[float, DamageResult]]) -> Tuple[float, Dict[AttributeName, float]]:
    """
    Combine damage results into a score and its resolved-attribute gradient.

    Args:
        weighted: (weight, damage result) pairs

    Returns:
        (sum of weight * expectation, sum of weight * gradient)
    """
    score = sum(weight * result.expectation for weight, result in weighted)
    gradient = merge_gradients(
        {name: weight * value for name, value in result.gradient.items()}
        for weight, result in weighted
    )
    return score, gradient


class TargetFunction:
    """
    Base class for every target function.

    Subclasses implement evaluate(), returning the score together with its
    gradient on resolved attribute values.
    """
    NAME: TargetFunctionName
    FOR_CHARACTER: Optional[CharacterName] = None
    CONFIG: Tuple[ItemConfig, ...] = ()

    @classmethod
    def create(cls, character: CharacterCommonData, weapon: WeaponCommonData, values: Dict[str, Any]):
        return cls(**config_from_dict(cls.CONFIG, values))

    def evaluate(
        self,
        attribute: AttributeGraph,
        character: Character,
        weapon: Weapon,
        artifacts: Sequence[Artifact],
        enemy: Enemy,
        resolver: Optional[EnemyResolver] = None,
    ) -> Tuple[float, Dict[AttributeName, float]]:
        raise NotImplementedError

    def target(
        self,
        attribute: AttributeGraph,
        character: Character,
        weapon: Weapon,
        artifacts: Sequence[Artifact],
        enemy: Enemy,
        resolver: Optional[EnemyResolver] = None,
    ) -> float:
        """Score of one build. Pure: identical inputs give identical scores."""
        score, _ = self.evaluate(attribute, character, weapon, artifacts, enemy, resolver)
        return score

    def target_with_gradient(
        self,
        attribute: AttributeGraph,
        character: Character,
        weapon: Weapon,
        artifacts: Sequence[Artifact],
        enemy: Enemy,
        resolver: Optional[EnemyResolver] = None,
    ) -> TargetValue:
        """
        Score plus its sensitivity to every attribute's composed value.

        The damage gradients (on resolved values) are seeded into the graph
        and propagated backward through every edge.
        """
        score, seeds = self.evaluate(attribute, character, weapon, artifacts, enemy, resolver)
        return TargetValue(score=score, gradient=attribute.backward(seeds))

    def get_target_function_opt_config(self) -> TargetFunctionOptConfig:
        raise NotImplementedError

    def get_default_artifact_config(self) -> ArtifactEffectConfig:
        return ArtifactEffectConfig()


# =============================================================================
# IMPLEMENTATIONS
# =============================================================================

@dataclass(frozen=True)
class IneffaDefaultTargetFunction(TargetFunction):
    """
    Normal DPS Ineffa.

    Formula:
        Score = NormalCombo * 0.4 + Skill * (1 + overclocking_rate) * 0.8
                + Burst * 0.6 + Charged * 0.3
    """
    NAME = TargetFunctionName.INEFFA_DEFAULT
    FOR_CHARACTER = CharacterName.INEFFA
    CONFIG = (float_config("overclocking_rate", "Overclocking Circuit Rate", 0.0, 1.0, 0.8),)

    overclocking_rate: float = 0.8

    def evaluate(self, attribute, character, weapon, artifacts, enemy, resolver=None):
        kit = get_character_kit(CharacterName.INEFFA)
        context = DamageContext(character.common_data, attribute, enemy, resolver)
        config = IneffaSkillConfig(overclocking_active=True)

        def dmg(skill: IneffaDamage) -> DamageResult:
            return kit.damage(context, skill, config)

        normal = [dmg(s) for s in (IneffaDamage.NORMAL1, IneffaDamage.NORMAL2,
                                   IneffaDamage.NORMAL3, IneffaDamage.NORMAL4)]
        weighted = [(0.4, result) for result in normal]
        weighted.append(((1 + self.overclocking_rate) * 0.8, dmg(IneffaDamage.SKILL)))
        weighted.append((0.6, dmg(IneffaDamage.BURST)))
        weighted.append((0.3, dmg(IneffaDamage.CHARGED)))
        return weighted_sum(weighted)

    def get_target_function_opt_config(self) -> TargetFunctionOptConfig:
        return TargetFunctionOptConfig(
            atk_percentage=1.0,
            recharge=0.3,
            elemental_mastery=0.5,
            critical=1.0,
            critical_damage=1.0,
            bonus_electro=2.0,
            sand_main_stats=[StatName.ATK_PERCENTAGE, StatName.ELEMENTAL_MASTERY, StatName.RECHARGE],
            goblet_main_stats=[StatName.ELECTRO_BONUS, StatName.ATK_PERCENTAGE],
            head_main_stats=[StatName.CRITICAL_RATE, StatName.CRITICAL_DAMAGE, StatName.ATK_PERCENTAGE],
            set_names=[
                ArtifactSetName.GILDED_DREAMS,
                ArtifactSetName.WANDERERS_TROUPE,
                ArtifactSetName.THUNDERING_FURY,
                ArtifactSetName.GLADIATORS_FINALE,
            ],
        )


@dataclass(frozen=True)
class KleeDefaultTargetFunction(TargetFunction):
    """
    Charged-attack Klee.

    Formula:
        Charged = rate * Charged(spark) + (1 - rate) * Charged(no spark)
        Score   = NormalCombo * 0.3 + Charged * 1.0 + (Bomb + Mine) * 0.5 + Burst * 0.6
    """
    NAME = TargetFunctionName.KLEE_DEFAULT
    FOR_CHARACTER = CharacterName.KLEE
    CONFIG = (float_config("explosive_spark_rate", "Explosive Spark Rate", 0.0, 1.0, 0.5),)

    explosive_spark_rate: float = 0.5

    def evaluate(self, attribute, character, weapon, artifacts, enemy, resolver=None):
        kit = get_character_kit(CharacterName.KLEE)
        context = DamageContext(character.common_data, attribute, enemy, resolver)
        spark = KleeSkillConfig(explosive_spark=True)
        no_spark = KleeSkillConfig(explosive_spark=False)

        weighted = [
            (0.3, kit.damage(context, skill, no_spark))
            for skill in (KleeDamage.NORMAL1, KleeDamage.NORMAL2, KleeDamage.NORMAL3)
        ]
        weighted.append((self.explosive_spark_rate, kit.damage(context, KleeDamage.CHARGED, spark)))
        weighted.append((1 - self.explosive_spark_rate, kit.damage(context, KleeDamage.CHARGED, no_spark)))
        weighted.append((0.5, kit.damage(context, KleeDamage.SKILL_BOMB, no_spark)))
        weighted.append((0.5, kit.damage(context, KleeDamage.SKILL_MINE, no_spark)))
        weighted.append((0.6, kit.damage(context, KleeDamage.BURST, no_spark)))
        return weighted_sum(weighted)

    def get_target_function_opt_config(self) -> TargetFunctionOptConfig:
        return TargetFunctionOptConfig(
            atk_percentage=1.0,
            elemental_mastery=0.3,
            critical=1.0,
            critical_damage=1.0,
            bonus_pyro=2.0,
            sand_main_stats=[StatName.ATK_PERCENTAGE, StatName.ELEMENTAL_MASTERY],
            goblet_main_stats=[StatName.PYRO_BONUS],
            head_main_stats=[StatName.CRITICAL_RATE, StatName.CRITICAL_DAMAGE],
            set_names=[
                ArtifactSetName.CRIMSON_WITCH_OF_FLAMES,
                ArtifactSetName.WANDERERS_TROUPE,
                ArtifactSetName.GLADIATORS_FINALE,
            ],
            very_critical_set_names=[ArtifactSetName.CRIMSON_WITCH_OF_FLAMES],
        )


@dataclass(frozen=True)
class MaxAtkTargetFunction(TargetFunction):
    """Score = resolved ATK. Usable with any character."""
    NAME = TargetFunctionName.MAX_ATK

    def evaluate(self, attribute, character, weapon, artifacts, enemy, resolver=None):
        return attribute.get_value(AttributeName.ATK), {AttributeName.ATK: 1.0}

    def get_target_function_opt_config(self) -> TargetFunctionOptConfig:
        return TargetFunctionOptConfig(
            atk_fixed=0.3,
            atk_percentage=1.0,
            sand_main_stats=[StatName.ATK_PERCENTAGE],
            goblet_main_stats=[StatName.ATK_PERCENTAGE],
            head_main_stats=[StatName.ATK_PERCENTAGE],
        )


# =============================================================================
# REGISTRY
# =============================================================================

TARGET_FUNCTION_TABLE: Dict[TargetFunctionName, Type[TargetFunction]] = {
    TargetFunctionName.INEFFA_DEFAULT: IneffaDefaultTargetFunction,
    TargetFunctionName.KLEE_DEFAULT: KleeDefaultTargetFunction,
    TargetFunctionName.MAX_ATK: MaxAtkTargetFunction,
}

# Target function used when a character has no explicit choice
DEFAULT_TARGET_FUNCTION: Dict[CharacterName, TargetFunctionName] = {
    CharacterName.INEFFA: TargetFunctionName.INEFFA_DEFAULT,
    CharacterName.KLEE: TargetFunctionName.KLEE_DEFAULT,
}


@dataclass(frozen=True)
class TargetFunctionConfig:
    """Tunable parameters for one named target function."""
    name: TargetFunctionName
    values: Dict[str, Any] = field(default_factory=dict)


def create_target_function(
    name: TargetFunctionName,
    character: CharacterCommonData,
    weapon: WeaponCommonData,
    config: Optional[TargetFunctionConfig] = None,
) -> TargetFunction:
    """
    Construct a target function.

    A config that belongs to a different target function is ignored with a
    warning and the defaults are used instead.

    Raises:
        ValueError: if the target function is tied to another character
    """
    cls = TARGET_FUNCTION_TABLE[name]
    if cls.FOR_CHARACTER is not None and cls.FOR_CHARACTER != character.name:
        raise ValueError(f"{name.value} cannot score {character.name.value}")

    values: Dict[str, Any] = {}
    if config is not None:
        if config.name == name:
            values = config.values
        else:
            logger.warning(
                "Target function config for %s passed to %s; using defaults",
                config.name.value, name.value,
            )
    return cls.create(character, weapon, values)


__all__ = [
    'TargetFunctionName',
    'DEFAULT_NORMAL_THRESHOLD',
    'DEFAULT_CRITICAL_THRESHOLD',
    'DEFAULT_VERY_CRITICAL_THRESHOLD',
    'TargetFunctionOptConfig',
    'TargetValue',
    'weighted_sum',
    'TargetFunction',
    'IneffaDefaultTargetFunction',
    'KleeDefaultTargetFunction',
    'MaxAtkTargetFunction',
    'TARGET_FUNCTION_TABLE',
    'DEFAULT_TARGET_FUNCTION',
    'TargetFunctionConfig',
    'create_target_function',
]
