"""
Genshin Calc - Artifact System
==============================
Artifact pieces, their main/sub stats and set bonuses.

Every artifact stat lands in the attribute store through apply_stat().
Set bonuses are flat modifiers, except where the bonus reads another stat
(Emblem of Severed Fate 4pc), which is registered as an edge.
"""

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .core.attribute import AttributeGraph, EdgeRule
from .core.constants import AttributeName, WeaponType
from .item_config import ItemConfig, float_config, int_config, config_from_dict
from .stat_names import StatName, SUB_STATS, apply_stat, get_stat_definition


# =============================================================================
# ENUMS
# =============================================================================

class ArtifactSlot(Enum):
    FLOWER = "flower"
    FEATHER = "feather"
    SAND = "sand"
    GOBLET = "goblet"
    HEAD = "head"


class ArtifactSetName(Enum):
    GLADIATORS_FINALE = "gladiators_finale"
    THUNDERING_FURY = "thundering_fury"
    GILDED_DREAMS = "gilded_dreams"
    WANDERERS_TROUPE = "wanderers_troupe"
    EMBLEM_OF_SEVERED_FATE = "emblem_of_severed_fate"
    CRIMSON_WITCH_OF_FLAMES = "crimson_witch_of_flames"
    NOBLESSE_OBLIGE = "noblesse_oblige"


# Slots whose main stat is fixed
FLOWER_MAIN_STAT = StatName.HP_FIXED
FEATHER_MAIN_STAT = StatName.ATK_FIXED
FIXED_MAIN_STATS: Dict[ArtifactSlot, StatName] = {
    ArtifactSlot.FLOWER: FLOWER_MAIN_STAT,
    ArtifactSlot.FEATHER: FEATHER_MAIN_STAT,
}

MAX_SUB_STATS = 4


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass
class Artifact:
    """
    One +20 five-star artifact.

    `main_value` defaults to the +20 main stat value of `main_stat`.
    """
    set_name: ArtifactSetName
    slot: ArtifactSlot
    main_stat: StatName
    sub_stats: List[Tuple[StatName, float]] = field(default_factory=list)
    main_value: Optional[float] = None

    def __post_init__(self):
        fixed = FIXED_MAIN_STATS.get(self.slot)
        if fixed is not None and self.main_stat != fixed:
            raise ValueError(
                f"{self.slot.value} main stat must be {fixed.value}, got {self.main_stat.value}"
            )
        if self.main_value is None:
            self.main_value = get_stat_definition(self.main_stat).main_value

        if len(self.sub_stats) > MAX_SUB_STATS:
            raise ValueError(f"An artifact has at most {MAX_SUB_STATS} sub stats, got {len(self.sub_stats)}")
        sub_names = [stat for stat, _ in self.sub_stats]
        if self.main_stat in sub_names:
            raise ValueError(f"Sub stat duplicates main stat {self.main_stat.value}")
        if len(set(sub_names)) != len(sub_names):
            raise ValueError("Each sub stat may appear only once")
        for stat in sub_names:
            if stat not in SUB_STATS:
                raise ValueError(f"{stat.value} cannot roll as a sub stat")

    def stats(self) -> List[Tuple[StatName, float]]:
        """Main stat followed by sub stats."""
        return [(self.main_stat, self.main_value)] + list(self.sub_stats)


@dataclass(frozen=True)
class ArtifactEffectConfig:
    """Conditional set bonus inputs (stack counts and uptimes)."""
    gilded_dreams_same_count: int = 0
    gilded_dreams_diff_count: int = 3
    crimson_witch_stack: float = 1.0
    noblesse_oblige_rate: float = 1.0

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]] = None) -> 'ArtifactEffectConfig':
        return cls(**config_from_dict(ARTIFACT_CONFIG_DATA, data))


ARTIFACT_CONFIG_DATA: Tuple[ItemConfig, ...] = (
    int_config("gilded_dreams_same_count", "Gilded Dreams: Same Element Members", 0, 3, 0),
    int_config("gilded_dreams_diff_count", "Gilded Dreams: Other Element Members", 0, 3, 3),
    float_config("crimson_witch_stack", "Crimson Witch: Stacks", 0.0, 3.0, 1.0),
    float_config("noblesse_oblige_rate", "Noblesse Oblige: 4pc Uptime", 0.0, 1.0, 1.0),
)


# =============================================================================
# SET BONUSES
# =============================================================================

MELEE_WEAPONS = (WeaponType.SWORD, WeaponType.CLAYMORE, WeaponType.POLEARM)
RANGED_WEAPONS = (WeaponType.CATALYST, WeaponType.BOW)


def _apply_set_bonus(
    graph: AttributeGraph,
    set_name: ArtifactSetName,
    count: int,
    weapon_type: WeaponType,
    config: ArtifactEffectConfig,
) -> None:
    two = count >= 2
    four = count >= 4

    if set_name == ArtifactSetName.GLADIATORS_FINALE:
        if two:
            graph.add_percentage(AttributeName.ATK, 0.18)
        if four and weapon_type in MELEE_WEAPONS:
            graph.add_flat(AttributeName.BONUS_NORMAL_ATTACK, 0.35)

    elif set_name == ArtifactSetName.THUNDERING_FURY:
        # 4pc boosts transformative reactions only
        if two:
            graph.add_flat(AttributeName.BONUS_ELECTRO, 0.15)

    elif set_name == ArtifactSetName.GILDED_DREAMS:
        if two:
            graph.add_flat(AttributeName.ELEMENTAL_MASTERY, 80.0)
        if four:
            graph.add_percentage(AttributeName.ATK, 0.14 * config.gilded_dreams_same_count)
            graph.add_flat(AttributeName.ELEMENTAL_MASTERY, 50.0 * config.gilded_dreams_diff_count)

    elif set_name == ArtifactSetName.WANDERERS_TROUPE:
        if two:
            graph.add_flat(AttributeName.ELEMENTAL_MASTERY, 80.0)
        if four and weapon_type in RANGED_WEAPONS:
            graph.add_flat(AttributeName.BONUS_CHARGED_ATTACK, 0.35)

    elif set_name == ArtifactSetName.EMBLEM_OF_SEVERED_FATE:
        if two:
            graph.add_flat(AttributeName.ENERGY_RECHARGE, 0.2)
        if four:
            graph.add_edge(
                (AttributeName.ENERGY_RECHARGE,),
                AttributeName.BONUS_ELEMENTAL_BURST,
                EdgeRule.CLAMPED_LINEAR,
                coefficient=0.25,
                label="Emblem of Severed Fate 4pc: burst bonus from recharge",
                cap=0.75,
            )

    elif set_name == ArtifactSetName.CRIMSON_WITCH_OF_FLAMES:
        if two:
            graph.add_flat(AttributeName.BONUS_PYRO, 0.15)
        if four:
            graph.add_flat(AttributeName.BONUS_PYRO, 0.075 * config.crimson_witch_stack)
            graph.add_flat(AttributeName.ENHANCE_MELT, 0.15)
            graph.add_flat(AttributeName.ENHANCE_VAPORIZE, 0.15)

    elif set_name == ArtifactSetName.NOBLESSE_OBLIGE:
        if two:
            graph.add_flat(AttributeName.BONUS_ELEMENTAL_BURST, 0.2)
        if four:
            graph.add_percentage(AttributeName.ATK, 0.2 * config.noblesse_oblige_rate)


def count_sets(artifacts: Sequence[Artifact]) -> Dict[ArtifactSetName, int]:
    return dict(Counter(artifact.set_name for artifact in artifacts))


def apply_artifacts(
    graph: AttributeGraph,
    artifacts: Sequence[Artifact],
    weapon_type: WeaponType,
    config: Optional[ArtifactEffectConfig] = None,
) -> None:
    """
    Add artifact stats and set bonuses to the graph.

    Args:
        graph: Attribute graph in its mutation phase
        artifacts: Up to five artifacts, one per slot
        weapon_type: Wielder's weapon type (some 4pc bonuses depend on it)
        config: Conditional set bonus inputs, defaults when None

    Raises:
        ValueError: if two artifacts occupy the same slot
    """
    if config is None:
        config = ArtifactEffectConfig()

    seen = set()
    for artifact in artifacts:
        if artifact.slot in seen:
            raise ValueError(f"Two artifacts in slot {artifact.slot.value}")
        seen.add(artifact.slot)
        for stat, value in artifact.stats():
            apply_stat(graph, stat, value)

    for set_name, count in count_sets(artifacts).items():
        _apply_set_bonus(graph, set_name, count, weapon_type, config)


__all__ = [
    'ArtifactSlot',
    'ArtifactSetName',
    'FLOWER_MAIN_STAT',
    'FEATHER_MAIN_STAT',
    'FIXED_MAIN_STATS',
    'MAX_SUB_STATS',
    'Artifact',
    'ArtifactEffectConfig',
    'ARTIFACT_CONFIG_DATA',
    'MELEE_WEAPONS',
    'RANGED_WEAPONS',
    'count_sets',
    'apply_artifacts',
]
