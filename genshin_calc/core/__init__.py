"""
Genshin Calc - Core Math Module
===============================
Attribute graph, damage builder and enemy mitigation.

All other modules should import from here rather than implementing their own formulas.
"""

from .constants import (
    # Enums
    Element,
    SkillType,
    WeaponType,
    AttributeName,
    # Base values
    BASE_CRITICAL_RATE,
    BASE_CRITICAL_DAMAGE,
    BASE_ENERGY_RECHARGE,
    SKILL_LEVEL_COUNT,
    # Lookups
    ELEMENT_BONUS,
    ELEMENT_RES_MINUS,
    SKILL_TYPE_BONUS,
    SKILL_TYPE_EXTRA_DAMAGE,
    LEVEL_BREAKPOINTS,
    get_level_breakpoint_index,
    interpolate_level_curve,
)

from .exceptions import (
    GenshinCalcError,
    AttributeCycleError,
    SkillLevelError,
)

from .attribute import (
    EdgeRule,
    Edge,
    StoreEntry,
    AttributeGraph,
    merge_gradients,
)

from .enemy import (
    Enemy,
    EnemyResolver,
    StandardEnemyResolver,
    NeutralEnemyResolver,
    STANDARD_RESOLVER,
    NEUTRAL_RESOLVER,
    calculate_defense_multiplier,
    calculate_resistance_multiplier,
)

from .damage import (
    DamageNumber,
    DamageResult,
    DamageBuilder,
    clamp_critical_rate,
    calculate_expectation,
    calculate_amplifying_multiplier,
)

__all__ = [
    # Constants
    'Element',
    'SkillType',
    'WeaponType',
    'AttributeName',
    'BASE_CRITICAL_RATE',
    'BASE_CRITICAL_DAMAGE',
    'BASE_ENERGY_RECHARGE',
    'SKILL_LEVEL_COUNT',
    'ELEMENT_BONUS',
    'ELEMENT_RES_MINUS',
    'SKILL_TYPE_BONUS',
    'SKILL_TYPE_EXTRA_DAMAGE',
    'LEVEL_BREAKPOINTS',
    'get_level_breakpoint_index',
    'interpolate_level_curve',
    # Errors
    'GenshinCalcError',
    'AttributeCycleError',
    'SkillLevelError',
    # Attribute graph
    'EdgeRule',
    'Edge',
    'StoreEntry',
    'AttributeGraph',
    'merge_gradients',
    # Enemy
    'Enemy',
    'EnemyResolver',
    'StandardEnemyResolver',
    'NeutralEnemyResolver',
    'STANDARD_RESOLVER',
    'NEUTRAL_RESOLVER',
    'calculate_defense_multiplier',
    'calculate_resistance_multiplier',
    # Damage
    'DamageNumber',
    'DamageResult',
    'DamageBuilder',
    'clamp_critical_rate',
    'calculate_expectation',
    'calculate_amplifying_multiplier',
]
