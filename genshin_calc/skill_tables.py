"""
Genshin Calc - Character Static Tables
======================================
Read-only per-character data: level curves, ascension stat and talent
multiplier tables. Loaded once at import and shared by every evaluation.

Talent tables hold 15 entries, indexed by talent level - 1.
Level curves hold 14 entries, one per LEVEL_BREAKPOINTS entry.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from .core.constants import Element, WeaponType
from .stat_names import StatName


class CharacterName(Enum):
    INEFFA = "ineffa"
    KLEE = "klee"


class TalentSlot(Enum):
    """Which of the three talents a constellation boosts."""
    NORMAL_ATTACK = 0
    ELEMENTAL_SKILL = 1
    ELEMENTAL_BURST = 2


# Fraction of the full ascension stat granted at each level breakpoint
ASCENSION_STAT_FRACTION: Tuple[float, ...] = (
    0.0, 0.0, 0.0, 0.0, 0.25, 0.25, 0.5, 0.5, 0.5, 0.5, 0.75, 0.75, 1.0, 1.0,
)


@dataclass(frozen=True)
class CharacterStaticData:
    name: CharacterName
    element: Element
    weapon_type: WeaponType
    star: int
    hp: Tuple[float, ...]
    atk: Tuple[float, ...]
    def_: Tuple[float, ...]
    sub_stat: StatName
    sub_stat_max: float
    c3_boost: TalentSlot
    c5_boost: TalentSlot
    skill_name1: str
    skill_name2: str
    skill_name3: str


# =============================================================================
# INEFFA (Electro, Polearm)
# =============================================================================

@dataclass(frozen=True)
class IneffaSkillTable:
    normal_dmg1: Tuple[float, ...]
    normal_dmg2: Tuple[float, ...]
    normal_dmg3: Tuple[float, ...]
    normal_dmg4: Tuple[float, ...]
    charged_dmg: Tuple[float, ...]
    plunging_dmg1: Tuple[float, ...]
    plunging_dmg2: Tuple[float, ...]
    plunging_dmg3: Tuple[float, ...]
    elemental_skill_dmg: Tuple[float, ...]
    elemental_burst_dmg: Tuple[float, ...]


INEFFA_SKILL = IneffaSkillTable(
    # Normal Attack: Cyclonic Duster
    normal_dmg1=(0.3484, 0.3767, 0.4051, 0.4456, 0.4739, 0.5063, 0.5509, 0.5954, 0.64, 0.6886, 0.7372, 0.7858, 0.8344, 0.883, 0.9316),
    normal_dmg2=(0.3422, 0.3701, 0.3979, 0.4377, 0.4656, 0.4974, 0.5412, 0.5849, 0.6287, 0.6765, 0.7242, 0.772, 0.8197, 0.8675, 0.9152),
    normal_dmg3=(0.4284, 0.4634, 0.4984, 0.5482, 0.5833, 0.6230, 0.6778, 0.7327, 0.7875, 0.8473, 0.9072, 0.9670, 1.0268, 1.0867, 1.1465),
    normal_dmg4=(0.5568, 0.6022, 0.6477, 0.7125, 0.7579, 0.8096, 0.8809, 0.9521, 1.0234, 1.1011, 1.1789, 1.2566, 1.3343, 1.4121, 1.4898),
    charged_dmg=(1.1138, 1.2046, 1.2954, 1.4249, 1.5157, 1.6193, 1.7617, 1.9041, 2.0466, 2.2022, 2.3579, 2.5136, 2.6692, 2.8249, 2.9806),
    plunging_dmg1=(0.6393, 0.6914, 0.7434, 0.8177, 0.8698, 0.9293, 1.0112, 1.0931, 1.175, 1.2638, 1.3526, 1.4414, 1.5302, 1.619, 1.7098),
    plunging_dmg2=(1.2784, 1.3824, 1.4865, 1.6351, 1.7392, 1.8581, 2.0216, 2.1851, 2.3486, 2.527, 2.7054, 2.8838, 3.0622, 3.2405, 3.4189),
    plunging_dmg3=(1.5968, 1.7267, 1.8567, 2.0424, 2.1723, 2.3209, 2.5251, 2.7293, 2.9336, 3.1564, 3.3792, 3.602, 3.8248, 4.0476, 4.2704),
    # Elemental Skill: Cleaning Mode: Carrier Frequency
    elemental_skill_dmg=(0.864, 0.9288, 0.9936, 1.08, 1.1448, 1.2096, 1.296, 1.3824, 1.4688, 1.5552, 1.6416, 1.728, 1.836, 1.944, 2.052),
    # Elemental Burst: Supreme Instruction: Cyclonic Exterminator
    elemental_burst_dmg=(6.768, 7.2756, 7.7832, 8.46, 8.9676, 9.4752, 10.152, 10.8288, 11.5056, 12.1824, 12.8592, 13.536, 14.382, 15.228, 16.074),
)

INEFFA_STATIC_DATA = CharacterStaticData(
    name=CharacterName.INEFFA,
    element=Element.ELECTRO,
    weapon_type=WeaponType.POLEARM,
    star=5,
    hp=(982, 2547, 3389, 5071, 5669, 6523, 7320, 8182, 8780, 9650, 10249, 11128, 11727, 12613),
    atk=(26, 67, 89, 133, 149, 171, 192, 214, 230, 253, 268, 291, 307, 330),
    def_=(64, 167, 222, 333, 372, 428, 480, 537, 576, 633, 673, 730, 770, 828),
    sub_stat=StatName.CRITICAL_RATE,
    sub_stat_max=0.192,
    c3_boost=TalentSlot.ELEMENTAL_SKILL,
    c5_boost=TalentSlot.ELEMENTAL_BURST,
    skill_name1="Normal Attack: Cyclonic Duster",
    skill_name2="Cleaning Mode: Carrier Frequency",
    skill_name3="Supreme Instruction: Cyclonic Exterminator",
)


# =============================================================================
# KLEE (Pyro, Catalyst)
# =============================================================================

@dataclass(frozen=True)
class KleeSkillTable:
    normal_dmg1: Tuple[float, ...]
    normal_dmg2: Tuple[float, ...]
    normal_dmg3: Tuple[float, ...]
    charged_dmg: Tuple[float, ...]
    elemental_skill_dmg1: Tuple[float, ...]
    elemental_skill_dmg2: Tuple[float, ...]
    elemental_burst_dmg: Tuple[float, ...]


KLEE_SKILL = KleeSkillTable(
    # Normal Attack: Kaboom!
    normal_dmg1=(0.7216, 0.7757, 0.8298, 0.902, 0.9561, 1.0102, 1.0824, 1.1546, 1.2267, 1.2989, 1.3711, 1.4432, 1.5334, 1.6236, 1.7138),
    normal_dmg2=(0.624, 0.6708, 0.7176, 0.78, 0.8268, 0.8736, 0.936, 0.9984, 1.0608, 1.1232, 1.1856, 1.248, 1.326, 1.404, 1.482),
    normal_dmg3=(0.8992, 0.9666, 1.0341, 1.124, 1.1914, 1.2589, 1.3488, 1.4387, 1.5286, 1.6186, 1.7085, 1.7984, 1.9108, 2.0232, 2.1356),
    charged_dmg=(1.5736, 1.6916, 1.8096, 1.967, 2.085, 2.203, 2.3604, 2.5178, 2.6751, 2.8325, 2.9898, 3.1472, 3.3439, 3.5406, 3.7373),
    # Elemental Skill: Jumpy Dumpty (bomb, then mines)
    elemental_skill_dmg1=(0.952, 1.0234, 1.0948, 1.19, 1.2614, 1.3328, 1.428, 1.5232, 1.6184, 1.7136, 1.8088, 1.904, 2.023, 2.142, 2.261),
    elemental_skill_dmg2=(0.328, 0.3526, 0.3772, 0.41, 0.4346, 0.4592, 0.492, 0.5248, 0.5576, 0.5904, 0.6232, 0.656, 0.697, 0.738, 0.779),
    # Elemental Burst: Sparks 'n' Splash
    elemental_burst_dmg=(0.4264, 0.4584, 0.4904, 0.533, 0.565, 0.597, 0.6396, 0.6822, 0.7249, 0.7675, 0.8102, 0.8528, 0.9061, 0.9594, 1.0127),
)

KLEE_STATIC_DATA = CharacterStaticData(
    name=CharacterName.KLEE,
    element=Element.PYRO,
    weapon_type=WeaponType.CATALYST,
    star=5,
    hp=(801, 2077, 2764, 4136, 4623, 5319, 5970, 6673, 7161, 7870, 8358, 9076, 9563, 10287),
    atk=(24, 63, 84, 125, 140, 161, 180, 202, 216, 238, 253, 274, 289, 311),
    def_=(48, 124, 165, 247, 276, 318, 357, 399, 428, 470, 500, 542, 572, 615),
    sub_stat=StatName.PYRO_BONUS,
    sub_stat_max=0.288,
    c3_boost=TalentSlot.ELEMENTAL_SKILL,
    c5_boost=TalentSlot.ELEMENTAL_BURST,
    skill_name1="Normal Attack: Kaboom!",
    skill_name2="Jumpy Dumpty",
    skill_name3="Sparks 'n' Splash",
)


__all__ = [
    'CharacterName',
    'TalentSlot',
    'ASCENSION_STAT_FRACTION',
    'CharacterStaticData',
    'IneffaSkillTable',
    'INEFFA_SKILL',
    'INEFFA_STATIC_DATA',
    'KleeSkillTable',
    'KLEE_SKILL',
    'KLEE_STATIC_DATA',
]
