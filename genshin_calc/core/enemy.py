"""
Genshin Calc - Enemy Mitigation
===============================
Enemy data and the defense/resistance model applied to outgoing damage.

The model is a separate collaborator behind EnemyResolver.resolve() so the
damage builder never hard-codes it. StandardEnemyResolver implements the
published game formulas; NeutralEnemyResolver applies no mitigation.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, Optional

from .constants import (
    DEFAULT_ENEMY_LEVEL,
    DEFAULT_ENEMY_RESISTANCE,
    Element,
    SkillType,
)


@dataclass(frozen=True)
class Enemy:
    """
    Enemy level, resistances and any shred already applied to it.

    Resistances are decimals (0.1 for 10%). Missing elements use
    `default_resistance`.
    """
    level: int = DEFAULT_ENEMY_LEVEL
    resistances: Dict[Element, float] = field(default_factory=dict)
    default_resistance: float = DEFAULT_ENEMY_RESISTANCE

    # Shred (filled by the damage builder)
    def_minus: float = 0.0
    def_penetration: float = 0.0
    res_minus: Dict[Element, float] = field(default_factory=dict)

    def resistance(self, element: Element) -> float:
        """Resistance to `element` after shred."""
        base = self.resistances.get(element, self.default_resistance)
        return base - self.res_minus.get(element, 0.0)

    def shredded(
        self,
        def_minus: float = 0.0,
        def_penetration: float = 0.0,
        res_minus: Optional[Dict[Element, float]] = None,
    ) -> 'Enemy':
        """Return a copy with additional shred stacked on top."""
        merged = dict(self.res_minus)
        for element, value in (res_minus or {}).items():
            merged[element] = merged.get(element, 0.0) + value
        return replace(
            self,
            def_minus=self.def_minus + def_minus,
            def_penetration=self.def_penetration + def_penetration,
            res_minus=merged,
        )


# =============================================================================
# FORMULAS
# =============================================================================

def calculate_defense_multiplier(
    attacker_level: int,
    enemy_level: int,
    def_minus: float = 0.0,
    def_penetration: float = 0.0,
) -> float:
    """
    Damage multiplier from enemy defense.

    Formula:
        (L + 100) / ((L + 100) + (Le + 100) * (1 - DefMinus) * (1 - DefPen))

    Def reduction is capped at 90% as in game.
    """
    def_minus = min(def_minus, 0.9)
    attacker = attacker_level + 100
    enemy = (enemy_level + 100) * (1 - def_minus) * (1 - def_penetration)
    return attacker / (attacker + enemy)


def calculate_resistance_multiplier(resistance: float) -> float:
    """
    Damage multiplier from enemy resistance.

    Formula:
        r < 0:     1 - r / 2
        r < 0.75:  1 - r
        otherwise: 1 / (4r + 1)
    """
    if resistance < 0:
        return 1 - resistance / 2
    if resistance < 0.75:
        return 1 - resistance
    return 1 / (4 * resistance + 1)


# =============================================================================
# RESOLVERS
# =============================================================================

class EnemyResolver:
    """Turns pre-mitigation damage into damage dealt to an enemy."""

    def multiplier(
        self,
        enemy: Enemy,
        element: Element,
        skill_type: SkillType,
        attacker_level: int,
    ) -> float:
        raise NotImplementedError

    def resolve(
        self,
        base_damage: float,
        enemy: Enemy,
        element: Element,
        skill_type: SkillType,
        attacker_level: int,
    ) -> float:
        return base_damage * self.multiplier(enemy, element, skill_type, attacker_level)


class StandardEnemyResolver(EnemyResolver):
    """Defense and resistance multipliers from the game formulas."""

    def multiplier(self, enemy, element, skill_type, attacker_level):
        def_mult = calculate_defense_multiplier(
            attacker_level, enemy.level, enemy.def_minus, enemy.def_penetration
        )
        res_mult = calculate_resistance_multiplier(enemy.resistance(element))
        return def_mult * res_mult


class NeutralEnemyResolver(EnemyResolver):
    """No mitigation at all: damage dealt equals pre-mitigation damage."""

    def multiplier(self, enemy, element, skill_type, attacker_level):
        return 1.0


STANDARD_RESOLVER = StandardEnemyResolver()
NEUTRAL_RESOLVER = NeutralEnemyResolver()


__all__ = [
    'Enemy',
    'calculate_defense_multiplier',
    'calculate_resistance_multiplier',
    'EnemyResolver',
    'StandardEnemyResolver',
    'NeutralEnemyResolver',
    'STANDARD_RESOLVER',
    'NEUTRAL_RESOLVER',
]
