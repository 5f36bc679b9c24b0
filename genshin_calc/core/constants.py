"""
Genshin Calc - Core Constants
=============================
Single source of truth for attribute names, elements, skill types and the
base values every build starts from.
"""

from enum import Enum
from typing import Dict, List, Tuple


# =============================================================================
# ENUMS
# =============================================================================

class Element(Enum):
    """Damage elements. PHYSICAL is treated as an element for bonus lookup."""
    PYRO = "pyro"
    HYDRO = "hydro"
    ELECTRO = "electro"
    ANEMO = "anemo"
    CRYO = "cryo"
    GEO = "geo"
    DENDRO = "dendro"
    PHYSICAL = "physical"


class SkillType(Enum):
    """
    Damage classification used for bonus and enemy lookups.

    Plunging attacks are split the same way the game splits them: the hit
    during the fall and the ground impact.
    """
    NORMAL_ATTACK = "normal_attack"
    CHARGED_ATTACK = "charged_attack"
    PLUNGING_ATTACK_IN_ACTION = "plunging_attack_in_action"
    PLUNGING_ATTACK_ON_GROUND = "plunging_attack_on_ground"
    ELEMENTAL_SKILL = "elemental_skill"
    ELEMENTAL_BURST = "elemental_burst"


class WeaponType(Enum):
    SWORD = "sword"
    CLAYMORE = "claymore"
    POLEARM = "polearm"
    BOW = "bow"
    CATALYST = "catalyst"


class AttributeName(Enum):
    """
    Closed set of numeric attributes a build can hold.

    Percent-like attributes are stored as decimals (0.05 for 5%).
    """
    # Panel stats
    HP = "hp"
    ATK = "atk"
    DEF = "def"
    ELEMENTAL_MASTERY = "elemental_mastery"
    CRITICAL_RATE = "critical_rate"
    CRITICAL_DAMAGE = "critical_damage"
    ENERGY_RECHARGE = "energy_recharge"
    HEALING_BONUS = "healing_bonus"
    SHIELD_STRENGTH = "shield_strength"

    # Damage bonus by element
    BONUS_BASE = "bonus_base"
    BONUS_PYRO = "bonus_pyro"
    BONUS_HYDRO = "bonus_hydro"
    BONUS_ELECTRO = "bonus_electro"
    BONUS_ANEMO = "bonus_anemo"
    BONUS_CRYO = "bonus_cryo"
    BONUS_GEO = "bonus_geo"
    BONUS_DENDRO = "bonus_dendro"
    BONUS_PHYSICAL = "bonus_physical"

    # Damage bonus by skill type
    BONUS_NORMAL_ATTACK = "bonus_normal_attack"
    BONUS_CHARGED_ATTACK = "bonus_charged_attack"
    BONUS_PLUNGING_ATTACK = "bonus_plunging_attack"
    BONUS_ELEMENTAL_SKILL = "bonus_elemental_skill"
    BONUS_ELEMENTAL_BURST = "bonus_elemental_burst"

    # Flat damage added to the base by skill type
    EXTRA_DMG_NORMAL_ATTACK = "extra_dmg_normal_attack"
    EXTRA_DMG_CHARGED_ATTACK = "extra_dmg_charged_attack"
    EXTRA_DMG_PLUNGING_ATTACK = "extra_dmg_plunging_attack"
    EXTRA_DMG_ELEMENTAL_SKILL = "extra_dmg_elemental_skill"
    EXTRA_DMG_ELEMENTAL_BURST = "extra_dmg_elemental_burst"

    # Enemy resistance reduction by element
    RES_MINUS_PYRO = "res_minus_pyro"
    RES_MINUS_HYDRO = "res_minus_hydro"
    RES_MINUS_ELECTRO = "res_minus_electro"
    RES_MINUS_ANEMO = "res_minus_anemo"
    RES_MINUS_CRYO = "res_minus_cryo"
    RES_MINUS_GEO = "res_minus_geo"
    RES_MINUS_DENDRO = "res_minus_dendro"
    RES_MINUS_PHYSICAL = "res_minus_physical"

    # Defense
    DEF_MINUS = "def_minus"
    DEF_PENETRATION = "def_penetration"

    # Amplifying reactions
    ENHANCE_MELT = "enhance_melt"
    ENHANCE_VAPORIZE = "enhance_vaporize"


# =============================================================================
# BASE VALUES (every character, before any gear)
# =============================================================================

BASE_CRITICAL_RATE = 0.05
BASE_CRITICAL_DAMAGE = 0.5
BASE_ENERGY_RECHARGE = 1.0

# Talent tables carry one entry per talent level 1..15
SKILL_LEVEL_COUNT = 15

MAX_CHARACTER_LEVEL = 90
MAX_CONSTELLATION = 6

# Level/ascension breakpoints shared by character and weapon curves.
# (level, ascended) - ascended means the breakpoint right after an ascension.
LEVEL_BREAKPOINTS: List[Tuple[int, bool]] = [
    (1, False),
    (20, False), (20, True),
    (40, False), (40, True),
    (50, False), (50, True),
    (60, False), (60, True),
    (70, False), (70, True),
    (80, False), (80, True),
    (90, False),
]

# Amplifying reaction constants
EM_REACTION_NUMERATOR = 2.78
EM_REACTION_DENOMINATOR = 1400.0

# Standard enemy
DEFAULT_ENEMY_LEVEL = 90
DEFAULT_ENEMY_RESISTANCE = 0.1


# =============================================================================
# LOOKUP TABLES
# =============================================================================

ELEMENT_BONUS: Dict[Element, AttributeName] = {
    Element.PYRO: AttributeName.BONUS_PYRO,
    Element.HYDRO: AttributeName.BONUS_HYDRO,
    Element.ELECTRO: AttributeName.BONUS_ELECTRO,
    Element.ANEMO: AttributeName.BONUS_ANEMO,
    Element.CRYO: AttributeName.BONUS_CRYO,
    Element.GEO: AttributeName.BONUS_GEO,
    Element.DENDRO: AttributeName.BONUS_DENDRO,
    Element.PHYSICAL: AttributeName.BONUS_PHYSICAL,
}

ELEMENT_RES_MINUS: Dict[Element, AttributeName] = {
    Element.PYRO: AttributeName.RES_MINUS_PYRO,
    Element.HYDRO: AttributeName.RES_MINUS_HYDRO,
    Element.ELECTRO: AttributeName.RES_MINUS_ELECTRO,
    Element.ANEMO: AttributeName.RES_MINUS_ANEMO,
    Element.CRYO: AttributeName.RES_MINUS_CRYO,
    Element.GEO: AttributeName.RES_MINUS_GEO,
    Element.DENDRO: AttributeName.RES_MINUS_DENDRO,
    Element.PHYSICAL: AttributeName.RES_MINUS_PHYSICAL,
}

SKILL_TYPE_BONUS: Dict[SkillType, AttributeName] = {
    SkillType.NORMAL_ATTACK: AttributeName.BONUS_NORMAL_ATTACK,
    SkillType.CHARGED_ATTACK: AttributeName.BONUS_CHARGED_ATTACK,
    SkillType.PLUNGING_ATTACK_IN_ACTION: AttributeName.BONUS_PLUNGING_ATTACK,
    SkillType.PLUNGING_ATTACK_ON_GROUND: AttributeName.BONUS_PLUNGING_ATTACK,
    SkillType.ELEMENTAL_SKILL: AttributeName.BONUS_ELEMENTAL_SKILL,
    SkillType.ELEMENTAL_BURST: AttributeName.BONUS_ELEMENTAL_BURST,
}

SKILL_TYPE_EXTRA_DAMAGE: Dict[SkillType, AttributeName] = {
    SkillType.NORMAL_ATTACK: AttributeName.EXTRA_DMG_NORMAL_ATTACK,
    SkillType.CHARGED_ATTACK: AttributeName.EXTRA_DMG_CHARGED_ATTACK,
    SkillType.PLUNGING_ATTACK_IN_ACTION: AttributeName.EXTRA_DMG_PLUNGING_ATTACK,
    SkillType.PLUNGING_ATTACK_ON_GROUND: AttributeName.EXTRA_DMG_PLUNGING_ATTACK,
    SkillType.ELEMENTAL_SKILL: AttributeName.EXTRA_DMG_ELEMENTAL_SKILL,
    SkillType.ELEMENTAL_BURST: AttributeName.EXTRA_DMG_ELEMENTAL_BURST,
}

# Skill types an infusion can convert from physical
INFUSIBLE_SKILL_TYPES = (
    SkillType.NORMAL_ATTACK,
    SkillType.CHARGED_ATTACK,
    SkillType.PLUNGING_ATTACK_IN_ACTION,
    SkillType.PLUNGING_ATTACK_ON_GROUND,
)

# Amplifying reaction base multipliers by trigger element
MELT_MULTIPLIER: Dict[Element, float] = {
    Element.PYRO: 2.0,
    Element.CRYO: 1.5,
}

VAPORIZE_MULTIPLIER: Dict[Element, float] = {
    Element.HYDRO: 2.0,
    Element.PYRO: 1.5,
}


def get_level_breakpoint_index(level: int, ascended: bool) -> int:
    """
    Index of the breakpoint at or directly below (level, ascended).

    Args:
        level: Character or weapon level (1-90)
        ascended: Whether the ascension at this level has been done

    Returns:
        Index into a 14-entry level curve
    """
    if level < 1 or level > MAX_CHARACTER_LEVEL:
        raise ValueError(f"Level must be 1-{MAX_CHARACTER_LEVEL}, got {level}")

    index = 0
    for i, (bp_level, bp_ascended) in enumerate(LEVEL_BREAKPOINTS):
        if bp_level < level or (bp_level == level and (ascended or not bp_ascended)):
            index = i
    return index


def interpolate_level_curve(curve, level: int, ascended: bool) -> float:
    """
    Read a 14-point level curve with linear interpolation between breakpoints.

    Between two breakpoints the lower one is always the post-ascension value
    and the upper one the pre-ascension value, matching how stats grow in game.
    """
    index = get_level_breakpoint_index(level, ascended)
    bp_level, _ = LEVEL_BREAKPOINTS[index]
    if bp_level == level or index == len(LEVEL_BREAKPOINTS) - 1:
        return float(curve[index])

    next_level, _ = LEVEL_BREAKPOINTS[index + 1]
    t = (level - bp_level) / (next_level - bp_level)
    return float(curve[index] + (curve[index + 1] - curve[index]) * t)
