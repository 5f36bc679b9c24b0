"""
Genshin Calc - Weapon System
============================
Weapon base ATK, sub stat growth and passive effects.

Weapons provide:
- Base ATK: added to the character's base ATK (percentage ATK scales both)
- Sub stat: grows with level along a fixed curve
- Passive: flat modifiers or attribute edges, scaled by refinement (1-5)

Passives that read another stat (Engulfing Lightning, Staff of Homa) are
registered as edges so that every later bonus to the source stat flows
through them.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple

from .core.attribute import AttributeGraph, EdgeRule
from .core.constants import (
    AttributeName,
    Element,
    ELEMENT_BONUS,
    WeaponType,
    get_level_breakpoint_index,
    interpolate_level_curve,
)
from .item_config import ItemConfig, float_config, config_from_dict
from .stat_names import StatName

logger = logging.getLogger(__name__)


# =============================================================================
# ENUMS
# =============================================================================

class WeaponName(Enum):
    ENGULFING_LIGHTNING = "engulfing_lightning"
    STAFF_OF_HOMA = "staff_of_homa"
    FAVONIUS_LANCE = "favonius_lance"
    LOST_PRAYER_TO_THE_SACRED_WINDS = "lost_prayer_to_the_sacred_winds"


MAX_REFINE = 5


# =============================================================================
# LEVEL CURVES
# =============================================================================
# One value per level breakpoint (1, 20, 20+, 40, 40+, ..., 80, 80+, 90)

BASE_ATK_46: Tuple[int, ...] = (46, 122, 153, 235, 266, 308, 340, 382, 414, 457, 488, 532, 563, 608)
BASE_ATK_44: Tuple[int, ...] = (44, 119, 144, 226, 252, 293, 319, 361, 387, 429, 455, 497, 523, 565)

# Sub stat multiplier relative to its level 1 value
SUB_STAT_GROWTH: Tuple[float, ...] = (
    1.0, 1.767, 1.767, 2.575, 2.575, 2.975, 2.975, 3.383, 3.383, 3.783, 3.783, 4.192, 4.192, 4.592,
)


# =============================================================================
# STATIC DATA
# =============================================================================

@dataclass(frozen=True)
class WeaponStaticData:
    """Read-only data of one weapon."""
    name: WeaponName
    display_name: str
    weapon_type: WeaponType
    star: int
    base_atk: Tuple[int, ...]
    sub_stat: StatName
    sub_stat_level1: float


WEAPON_STATIC_DATA: Dict[WeaponName, WeaponStaticData] = {
    d.name: d for d in [
        WeaponStaticData(WeaponName.ENGULFING_LIGHTNING, "Engulfing Lightning",
                         WeaponType.POLEARM, 5, BASE_ATK_46, StatName.RECHARGE, 0.12),
        WeaponStaticData(WeaponName.STAFF_OF_HOMA, "Staff of Homa",
                         WeaponType.POLEARM, 5, BASE_ATK_46, StatName.CRITICAL_DAMAGE, 0.144),
        WeaponStaticData(WeaponName.FAVONIUS_LANCE, "Favonius Lance",
                         WeaponType.POLEARM, 4, BASE_ATK_44, StatName.RECHARGE, 0.067),
        WeaponStaticData(WeaponName.LOST_PRAYER_TO_THE_SACRED_WINDS, "Lost Prayer to the Sacred Winds",
                         WeaponType.CATALYST, 5, BASE_ATK_46, StatName.CRITICAL_RATE, 0.072),
    ]
}


def refine_value(first: float, step: float, refine: int) -> float:
    """Passive value at a refinement: first + step * (refine - 1)."""
    return first + step * (refine - 1)


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass
class WeaponCommonData:
    """A specific weapon: level, ascension and refinement."""
    name: WeaponName
    level: int = 90
    ascended: bool = False
    refine: int = 1

    def __post_init__(self):
        get_level_breakpoint_index(self.level, self.ascended)
        if not 1 <= self.refine <= MAX_REFINE:
            raise ValueError(f"Refine must be 1-{MAX_REFINE}, got {self.refine}")

    @property
    def static_data(self) -> WeaponStaticData:
        return WEAPON_STATIC_DATA[self.name]

    @property
    def base_atk(self) -> float:
        return interpolate_level_curve(self.static_data.base_atk, self.level, self.ascended)

    def sub_stat(self) -> Tuple[StatName, float]:
        """Sub stat and its value at the current level."""
        index = get_level_breakpoint_index(self.level, self.ascended)
        static = self.static_data
        return static.sub_stat, static.sub_stat_level1 * SUB_STAT_GROWTH[index]


# =============================================================================
# PASSIVE EFFECTS
# =============================================================================
# Each effect receives the graph, the weapon, the total base ATK of the
# build and the coerced weapon config.

def _engulfing_lightning(graph: AttributeGraph, weapon: WeaponCommonData, base_atk: float, config: Dict[str, Any]):
    """
    Timeless Dream: Eternal Stove.

    ATK +28% of recharge above 100%, up to +80% ATK. After a burst,
    recharge +30% for 12s (weighted by `rate`).
    """
    r = weapon.refine
    graph.add_edge(
        (AttributeName.ENERGY_RECHARGE,),
        AttributeName.ATK,
        EdgeRule.CLAMPED_LINEAR,
        coefficient=base_atk * refine_value(0.28, 0.07, r),
        label="Engulfing Lightning: ATK from recharge",
        offset=1.0,
        cap=base_atk * refine_value(0.8, 0.1, r),
    )
    graph.add_flat(AttributeName.ENERGY_RECHARGE, config["rate"] * refine_value(0.3, 0.05, r))


def _staff_of_homa(graph: AttributeGraph, weapon: WeaponCommonData, base_atk: float, config: Dict[str, Any]):
    """
    Reckless Cinnabar.

    HP +20%. ATK +0.8% of max HP, plus another 1% of max HP while the
    wielder is below 50% HP (weighted by `be50_rate`).
    """
    r = weapon.refine
    graph.add_percentage(AttributeName.HP, refine_value(0.2, 0.05, r))
    ratio = refine_value(0.008, 0.002, r) + config["be50_rate"] * refine_value(0.01, 0.002, r)
    graph.add_linear_edge(AttributeName.HP, AttributeName.ATK, ratio, "Staff of Homa: ATK from HP")


def _lost_prayer(graph: AttributeGraph, weapon: WeaponCommonData, base_atk: float, config: Dict[str, Any]):
    """Boundless Blessing: elemental DMG bonus +8% per stack, up to 4 stacks."""
    bonus = config["stack"] * refine_value(0.08, 0.02, weapon.refine)
    for element, name in ELEMENT_BONUS.items():
        if element != Element.PHYSICAL:
            graph.add_flat(name, bonus)


WEAPON_EFFECTS: Dict[WeaponName, Callable] = {
    WeaponName.ENGULFING_LIGHTNING: _engulfing_lightning,
    WeaponName.STAFF_OF_HOMA: _staff_of_homa,
    WeaponName.LOST_PRAYER_TO_THE_SACRED_WINDS: _lost_prayer,
}

WEAPON_CONFIG_DATA: Dict[WeaponName, Tuple[ItemConfig, ...]] = {
    WeaponName.ENGULFING_LIGHTNING: (float_config("rate", "Burst Recharge Uptime", 0.0, 1.0, 0.0),),
    WeaponName.STAFF_OF_HOMA: (float_config("be50_rate", "HP Below 50% Uptime", 0.0, 1.0, 1.0),),
    WeaponName.LOST_PRAYER_TO_THE_SACRED_WINDS: (float_config("stack", "Stacks", 0.0, 4.0, 4.0),),
}


@dataclass
class Weapon:
    """A weapon as equipped in one build."""
    common_data: WeaponCommonData
    config: Optional[Dict[str, Any]] = None

    @property
    def name(self) -> WeaponName:
        return self.common_data.name

    @property
    def weapon_type(self) -> WeaponType:
        return self.common_data.static_data.weapon_type

    def resolved_config(self) -> Dict[str, Any]:
        return config_from_dict(WEAPON_CONFIG_DATA.get(self.name, ()), self.config)

    def check_wielder(self, weapon_type: WeaponType) -> None:
        """
        Raises:
            ValueError: if the character cannot wield this weapon type
        """
        if weapon_type != self.weapon_type:
            raise ValueError(
                f"{self.common_data.static_data.display_name} is a {self.weapon_type.value}, "
                f"character wields {weapon_type.value}"
            )

    def apply_effect(self, graph: AttributeGraph, base_atk: float) -> None:
        """
        Register the passive on the graph.

        Args:
            graph: Attribute graph in its mutation phase
            base_atk: Character base ATK + weapon base ATK
        """
        effect = WEAPON_EFFECTS.get(self.name)
        if effect is None:
            logger.debug("%s has no damage passive", self.name.value)
            return
        effect(graph, self.common_data, base_atk, self.resolved_config())


__all__ = [
    'WeaponName',
    'MAX_REFINE',
    'BASE_ATK_46',
    'BASE_ATK_44',
    'SUB_STAT_GROWTH',
    'WeaponStaticData',
    'WEAPON_STATIC_DATA',
    'refine_value',
    'WeaponCommonData',
    'WEAPON_EFFECTS',
    'WEAPON_CONFIG_DATA',
    'Weapon',
]
