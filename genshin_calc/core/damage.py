"""
Genshin Calc - Damage Builder
=============================
Turns resolved attributes plus a skill's ratios into expected damage.

Master Formula:
    Base      = sum(ratio * stat) + flat extra damage
    Bonus     = all-damage bonus + element bonus + skill-type bonus
    Normal    = resolve(Base * (1 + Bonus))          (enemy defense/resistance)
    Critical  = Normal * (1 + CritDMG)
    Expected  = (1 - CR) * Normal + CR * Critical    (CR clamped to [0, 1])

The builder is an accumulator of labelled terms. damage() is a pure function
of the builder terms, the attribute graph and the enemy.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .attribute import AttributeGraph
from .constants import (
    AttributeName,
    Element,
    SkillType,
    ELEMENT_BONUS,
    ELEMENT_RES_MINUS,
    SKILL_TYPE_BONUS,
    SKILL_TYPE_EXTRA_DAMAGE,
    INFUSIBLE_SKILL_TYPES,
    MELT_MULTIPLIER,
    VAPORIZE_MULTIPLIER,
    EM_REACTION_NUMERATOR,
    EM_REACTION_DENOMINATOR,
)
from .enemy import Enemy, EnemyResolver, STANDARD_RESOLVER


# =============================================================================
# RESULT DATACLASSES
# =============================================================================

@dataclass(frozen=True)
class DamageNumber:
    """One damage outcome distribution: non-crit, crit and their expectation."""
    non_critical: float
    critical: float
    expectation: float

    def scaled(self, factor: float) -> 'DamageNumber':
        return DamageNumber(
            non_critical=self.non_critical * factor,
            critical=self.critical * factor,
            expectation=self.expectation * factor,
        )


@dataclass
class DamageResult:
    """Complete damage calculation result with breakdown."""
    normal: DamageNumber
    melt: Optional[DamageNumber]
    vaporize: Optional[DamageNumber]
    element: Element
    skill_type: SkillType
    base_damage: float
    bonus: float
    critical_rate: float
    critical_damage: float
    enemy_multiplier: float
    terms: List[Tuple[str, str, float]] = field(default_factory=list)
    # d normal.expectation / d resolved attribute
    gradient: Dict[AttributeName, float] = field(default_factory=dict)

    @property
    def expectation(self) -> float:
        return self.normal.expectation

    @property
    def normal_damage(self) -> float:
        return self.normal.non_critical

    @property
    def crit_damage(self) -> float:
        return self.normal.critical

    def breakdown(self) -> str:
        """Return formatted breakdown of damage calculation."""
        term_lines = "\n".join(
            f"  [{kind}] {label}: {value:.4f}" for kind, label, value in self.terms
        )
        return f"""
Damage Calculation Breakdown ({self.element.value}, {self.skill_type.value})
============================
Terms:
{term_lines}
Base Damage:        {self.base_damage:,.2f}
x (1 + Bonus):      {1 + self.bonus:.4f}
x Enemy:            {self.enemy_multiplier:.4f}
----------------------------
= Non-Critical:     {self.normal.non_critical:,.2f}
  Critical:         {self.normal.critical:,.2f}   (CD {self.critical_damage:.4f})
  Expectation:      {self.normal.expectation:,.2f}   (CR {self.critical_rate:.4f})
"""


# =============================================================================
# HELPERS
# =============================================================================

def clamp_critical_rate(critical_rate: float) -> float:
    """Crit rate above 100% (or below 0%) has no further effect."""
    return min(max(critical_rate, 0.0), 1.0)


def calculate_expectation(non_critical: float, critical_rate: float, critical_damage: float) -> DamageNumber:
    """
    Crit-weighted mixture of one hit.

    Formula:
        Critical    = NonCrit * (1 + CritDMG)
        Expectation = (1 - CR) * NonCrit + CR * Critical

    Args:
        non_critical: Damage of a non-critical hit
        critical_rate: Crit rate as decimal (clamped to [0, 1] here)
        critical_damage: Crit damage bonus as decimal (0.5 for 50%)
    """
    cr = clamp_critical_rate(critical_rate)
    critical = non_critical * (1 + critical_damage)
    return DamageNumber(
        non_critical=non_critical,
        critical=critical,
        expectation=(1 - cr) * non_critical + cr * critical,
    )


def calculate_amplifying_multiplier(base_multiplier: float, em: float, enhance: float = 0.0) -> float:
    """
    Melt / vaporize multiplier.

    Formula:
        Mult = Base * (1 + 2.78 * EM / (EM + 1400) + ReactionBonus)
    """
    em_bonus = EM_REACTION_NUMERATOR * em / (em + EM_REACTION_DENOMINATOR)
    return base_multiplier * (1 + em_bonus + enhance)


def _add(gradient: Dict[AttributeName, float], name: AttributeName, value: float) -> None:
    gradient[name] = gradient.get(name, 0.0) + value


# =============================================================================
# DAMAGE BUILDER
# =============================================================================

class DamageBuilder:
    """Accumulates the labelled terms of one damage instance."""

    def __init__(self):
        # (base attribute, label, ratio)
        self.ratios: List[Tuple[AttributeName, str, float]] = []
        # (label, value) lists
        self.extra_damage: List[Tuple[str, float]] = []
        self.extra_bonus: List[Tuple[str, float]] = []
        self.extra_critical: List[Tuple[str, float]] = []
        self.extra_critical_damage: List[Tuple[str, float]] = []
        self.extra_def_minus: List[Tuple[str, float]] = []
        self.extra_def_penetration: List[Tuple[str, float]] = []
        self.extra_res_minus: List[Tuple[str, float]] = []
        self.extra_em: List[Tuple[str, float]] = []
        self.extra_enhance_melt: List[Tuple[str, float]] = []
        self.extra_enhance_vaporize: List[Tuple[str, float]] = []

    def add_ratio(self, label: str, ratio: float, base: AttributeName = AttributeName.ATK):
        """ratio x <base stat> contributes to base damage."""
        self.ratios.append((base, label, ratio))

    def add_atk_ratio(self, label: str, ratio: float):
        self.add_ratio(label, ratio, AttributeName.ATK)

    def add_hp_ratio(self, label: str, ratio: float):
        self.add_ratio(label, ratio, AttributeName.HP)

    def add_def_ratio(self, label: str, ratio: float):
        self.add_ratio(label, ratio, AttributeName.DEF)

    def add_em_ratio(self, label: str, ratio: float):
        self.add_ratio(label, ratio, AttributeName.ELEMENTAL_MASTERY)

    def add_extra_damage(self, label: str, value: float):
        self.extra_damage.append((label, value))

    def add_extra_bonus(self, label: str, value: float):
        self.extra_bonus.append((label, value))

    def add_extra_critical(self, label: str, value: float):
        self.extra_critical.append((label, value))

    def add_extra_critical_damage(self, label: str, value: float):
        self.extra_critical_damage.append((label, value))

    def add_extra_def_minus(self, label: str, value: float):
        self.extra_def_minus.append((label, value))

    def add_extra_def_penetration(self, label: str, value: float):
        self.extra_def_penetration.append((label, value))

    def add_extra_res_minus(self, label: str, value: float):
        self.extra_res_minus.append((label, value))

    def add_extra_em(self, label: str, value: float):
        self.extra_em.append((label, value))

    def add_extra_enhance_melt(self, label: str, value: float):
        self.extra_enhance_melt.append((label, value))

    def add_extra_enhance_vaporize(self, label: str, value: float):
        self.extra_enhance_vaporize.append((label, value))

    def _terms(self) -> List[Tuple[str, str, float]]:
        terms = [(f"{base.value} ratio", label, ratio) for base, label, ratio in self.ratios]
        for kind, entries in (
            ('extra damage', self.extra_damage),
            ('bonus', self.extra_bonus),
            ('critical', self.extra_critical),
            ('critical damage', self.extra_critical_damage),
            ('def minus', self.extra_def_minus),
            ('def penetration', self.extra_def_penetration),
            ('res minus', self.extra_res_minus),
            ('em', self.extra_em),
            ('melt', self.extra_enhance_melt),
            ('vaporize', self.extra_enhance_vaporize),
        ):
            terms.extend((kind, label, value) for label, value in entries)
        return terms

    def damage(
        self,
        attribute: AttributeGraph,
        enemy: Enemy,
        element: Element,
        skill_type: SkillType,
        level: int,
        override_element: Optional[Element] = None,
        resolver: Optional[EnemyResolver] = None,
    ) -> DamageResult:
        """
        Evaluate the accumulated terms against resolved attributes and an enemy.

        Args:
            attribute: Resolved attribute graph of the attacker
            enemy: Enemy before any shred from this build
            element: Element of the hit
            skill_type: Skill classification of the hit
            level: Attacker level (defense formula)
            override_element: Infusion; replaces PHYSICAL on normal, charged
                and plunging attacks only
            resolver: Defense/resistance model (game formulas by default)

        Returns:
            DamageResult with normal, melt and vaporize outcomes and the
            gradient of the normal expectation
        """
        if resolver is None:
            resolver = STANDARD_RESOLVER
        if (override_element is not None
                and element == Element.PHYSICAL
                and skill_type in INFUSIBLE_SKILL_TYPES):
            element = override_element

        get = attribute.get_value

        # Base damage
        ratio_sums: Dict[AttributeName, float] = {}
        for base, _, ratio in self.ratios:
            ratio_sums[base] = ratio_sums.get(base, 0.0) + ratio
        extra_damage_name = SKILL_TYPE_EXTRA_DAMAGE[skill_type]
        base_damage = sum(ratio * get(name) for name, ratio in ratio_sums.items())
        base_damage += sum(v for _, v in self.extra_damage) + get(extra_damage_name)

        # Bonus
        bonus_names = (AttributeName.BONUS_BASE, ELEMENT_BONUS[element], SKILL_TYPE_BONUS[skill_type])
        bonus = sum(get(name) for name in bonus_names) + sum(v for _, v in self.extra_bonus)

        # Critical
        raw_critical_rate = get(AttributeName.CRITICAL_RATE) + sum(v for _, v in self.extra_critical)
        critical_rate = clamp_critical_rate(raw_critical_rate)
        critical_damage = get(AttributeName.CRITICAL_DAMAGE) + sum(v for _, v in self.extra_critical_damage)

        # Enemy
        effective_enemy = enemy.shredded(
            def_minus=get(AttributeName.DEF_MINUS) + sum(v for _, v in self.extra_def_minus),
            def_penetration=get(AttributeName.DEF_PENETRATION) + sum(v for _, v in self.extra_def_penetration),
            res_minus={element: get(ELEMENT_RES_MINUS[element]) + sum(v for _, v in self.extra_res_minus)},
        )
        enemy_multiplier = resolver.multiplier(effective_enemy, element, skill_type, level)
        non_critical = resolver.resolve(base_damage * (1 + bonus), effective_enemy, element, skill_type, level)

        normal = calculate_expectation(non_critical, critical_rate, critical_damage)

        # Amplifying reactions
        em = get(AttributeName.ELEMENTAL_MASTERY) + sum(v for _, v in self.extra_em)
        melt = None
        if element in MELT_MULTIPLIER:
            enhance = get(AttributeName.ENHANCE_MELT) + sum(v for _, v in self.extra_enhance_melt)
            melt = normal.scaled(calculate_amplifying_multiplier(MELT_MULTIPLIER[element], em, enhance))
        vaporize = None
        if element in VAPORIZE_MULTIPLIER:
            enhance = get(AttributeName.ENHANCE_VAPORIZE) + sum(v for _, v in self.extra_enhance_vaporize)
            vaporize = normal.scaled(calculate_amplifying_multiplier(VAPORIZE_MULTIPLIER[element], em, enhance))

        # Gradient of normal.expectation = Base * (1 + Bonus) * M * (1 + CR * CD)
        crit_factor = 1 + critical_rate * critical_damage
        per_base = (1 + bonus) * enemy_multiplier * crit_factor
        gradient: Dict[AttributeName, float] = {}
        for name, ratio in ratio_sums.items():
            _add(gradient, name, ratio * per_base)
        _add(gradient, extra_damage_name, per_base)
        for name in bonus_names:
            _add(gradient, name, base_damage * enemy_multiplier * crit_factor)
        pre_crit = base_damage * (1 + bonus) * enemy_multiplier
        cr_active = 0.0 < raw_critical_rate < 1.0
        _add(gradient, AttributeName.CRITICAL_RATE, pre_crit * critical_damage if cr_active else 0.0)
        _add(gradient, AttributeName.CRITICAL_DAMAGE, pre_crit * critical_rate)

        return DamageResult(
            normal=normal,
            melt=melt,
            vaporize=vaporize,
            element=element,
            skill_type=skill_type,
            base_damage=base_damage,
            bonus=bonus,
            critical_rate=critical_rate,
            critical_damage=critical_damage,
            enemy_multiplier=enemy_multiplier,
            terms=self._terms(),
            gradient=gradient,
        )


__all__ = [
    'DamageNumber',
    'DamageResult',
    'DamageBuilder',
    'clamp_critical_rate',
    'calculate_expectation',
    'calculate_amplifying_multiplier',
]
