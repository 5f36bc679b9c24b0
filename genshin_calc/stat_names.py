"""
Genshin Calc - Standardized Stat Definitions
============================================
Central definition of every stat a piece of gear (artifact main/sub stat,
weapon sub stat, ascension stat) can carry, and where it lands in the
attribute store.

Naming Conventions:
- Flat stats: {STAT}_FIXED (e.g., ATK_FIXED)
- Percentage stats: {STAT}_PERCENTAGE (applied to the attribute's base)
- Everything else adds directly to its attribute
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict

from .core.attribute import AttributeGraph
from .core.constants import AttributeName


class StatName(Enum):
    HP_FIXED = "hp_fixed"
    HP_PERCENTAGE = "hp_percentage"
    ATK_FIXED = "atk_fixed"
    ATK_PERCENTAGE = "atk_percentage"
    DEF_FIXED = "def_fixed"
    DEF_PERCENTAGE = "def_percentage"
    ELEMENTAL_MASTERY = "elemental_mastery"
    RECHARGE = "recharge"
    CRITICAL_RATE = "critical_rate"
    CRITICAL_DAMAGE = "critical_damage"
    HEALING_BONUS = "healing_bonus"
    PYRO_BONUS = "pyro_bonus"
    HYDRO_BONUS = "hydro_bonus"
    ELECTRO_BONUS = "electro_bonus"
    ANEMO_BONUS = "anemo_bonus"
    CRYO_BONUS = "cryo_bonus"
    GEO_BONUS = "geo_bonus"
    DENDRO_BONUS = "dendro_bonus"
    PHYSICAL_BONUS = "physical_bonus"


class StatComponent(Enum):
    """Which store input of the attribute a stat feeds."""
    FLAT = "flat"
    PERCENTAGE = "percentage"


@dataclass(frozen=True)
class StatDefinition:
    """Definition of a stat with all metadata."""
    key: StatName
    display_name: str
    attribute: AttributeName
    component: StatComponent
    max_sub_roll: float = 0.0     # 5-star max sub-stat roll, 0 if never a sub stat
    main_value: float = 0.0       # 5-star +20 main-stat value, 0 if never a main stat

    @property
    def is_percentage(self) -> bool:
        return self.key not in (StatName.HP_FIXED, StatName.ATK_FIXED,
                                StatName.DEF_FIXED, StatName.ELEMENTAL_MASTERY)

    def format_value(self, value: float) -> str:
        """Format a value for display."""
        if self.is_percentage:
            return f"{value * 100:.1f}%"
        return f"{value:,.0f}"


def _bonus(key: StatName, display: str, attribute: AttributeName, main_value: float = 0.466) -> StatDefinition:
    return StatDefinition(key, display, attribute, StatComponent.FLAT, main_value=main_value)


STAT_DEFINITIONS: Dict[StatName, StatDefinition] = {
    d.key: d for d in [
        StatDefinition(StatName.HP_FIXED, "HP", AttributeName.HP, StatComponent.FLAT, 298.75, 4780.0),
        StatDefinition(StatName.HP_PERCENTAGE, "HP %", AttributeName.HP, StatComponent.PERCENTAGE, 0.0583, 0.466),
        StatDefinition(StatName.ATK_FIXED, "ATK", AttributeName.ATK, StatComponent.FLAT, 19.45, 311.0),
        StatDefinition(StatName.ATK_PERCENTAGE, "ATK %", AttributeName.ATK, StatComponent.PERCENTAGE, 0.0583, 0.466),
        StatDefinition(StatName.DEF_FIXED, "DEF", AttributeName.DEF, StatComponent.FLAT, 23.15),
        StatDefinition(StatName.DEF_PERCENTAGE, "DEF %", AttributeName.DEF, StatComponent.PERCENTAGE, 0.0729, 0.583),
        StatDefinition(StatName.ELEMENTAL_MASTERY, "Elemental Mastery",
                       AttributeName.ELEMENTAL_MASTERY, StatComponent.FLAT, 23.31, 186.5),
        StatDefinition(StatName.RECHARGE, "Energy Recharge",
                       AttributeName.ENERGY_RECHARGE, StatComponent.FLAT, 0.0648, 0.518),
        StatDefinition(StatName.CRITICAL_RATE, "CRIT Rate",
                       AttributeName.CRITICAL_RATE, StatComponent.FLAT, 0.0389, 0.311),
        StatDefinition(StatName.CRITICAL_DAMAGE, "CRIT DMG",
                       AttributeName.CRITICAL_DAMAGE, StatComponent.FLAT, 0.0777, 0.622),
        StatDefinition(StatName.HEALING_BONUS, "Healing Bonus",
                       AttributeName.HEALING_BONUS, StatComponent.FLAT, main_value=0.359),
        _bonus(StatName.PYRO_BONUS, "Pyro DMG Bonus", AttributeName.BONUS_PYRO),
        _bonus(StatName.HYDRO_BONUS, "Hydro DMG Bonus", AttributeName.BONUS_HYDRO),
        _bonus(StatName.ELECTRO_BONUS, "Electro DMG Bonus", AttributeName.BONUS_ELECTRO),
        _bonus(StatName.ANEMO_BONUS, "Anemo DMG Bonus", AttributeName.BONUS_ANEMO),
        _bonus(StatName.CRYO_BONUS, "Cryo DMG Bonus", AttributeName.BONUS_CRYO),
        _bonus(StatName.GEO_BONUS, "Geo DMG Bonus", AttributeName.BONUS_GEO),
        _bonus(StatName.DENDRO_BONUS, "Dendro DMG Bonus", AttributeName.BONUS_DENDRO),
        _bonus(StatName.PHYSICAL_BONUS, "Physical DMG Bonus", AttributeName.BONUS_PHYSICAL, 0.583),
    ]
}

# Stats that can roll as artifact sub stats
SUB_STATS = [name for name, d in STAT_DEFINITIONS.items() if d.max_sub_roll > 0]


def get_stat_definition(stat: StatName) -> StatDefinition:
    return STAT_DEFINITIONS[stat]


def get_stat_display_name(stat: StatName) -> str:
    return STAT_DEFINITIONS[stat].display_name


def apply_stat(graph: AttributeGraph, stat: StatName, value: float) -> None:
    """
    Add a gear stat to the attribute store.

    ATK_PERCENTAGE goes to the ATK percentage input, ATK_FIXED to the ATK
    flat input, and every other stat to its attribute's flat input.
    """
    definition = get_stat_definition(stat)
    if definition.component == StatComponent.PERCENTAGE:
        graph.add_percentage(definition.attribute, value)
    else:
        graph.add_flat(definition.attribute, value)


__all__ = [
    'StatName',
    'StatComponent',
    'StatDefinition',
    'STAT_DEFINITIONS',
    'SUB_STATS',
    'get_stat_definition',
    'get_stat_display_name',
    'apply_stat',
]
