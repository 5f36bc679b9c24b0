"""
Genshin Calc - Stat Sensitivity
===============================
Turns an attribute gradient into per-stat importance for the optimizer,
and provides a finite-difference reference to check analytic gradients.

Key insight: the gradient is taken with respect to each attribute's
composed value, so a gear stat's marginal value depends on which store
input it feeds:

    d score / d flat        = g * (1 + percentage)
    d score / d percentage  = g * (base + flat)

Usage:
    value = tf.target_with_gradient(graph, character, weapon, artifacts, enemy)
    table = sensitivity_table(graph, value.gradient, tf.get_target_function_opt_config())
"""

from typing import Callable, Dict, Iterable, List, Optional

import numpy as np
import pandas as pd

from .core.attribute import AttributeGraph
from .core.constants import AttributeName
from .stat_names import (
    STAT_DEFINITIONS,
    SUB_STATS,
    StatComponent,
    StatName,
    get_stat_definition,
    get_stat_display_name,
)


# =============================================================================
# STAT GRADIENT
# =============================================================================

def stat_gradient(
    graph: AttributeGraph,
    attribute_gradient: Dict[AttributeName, float],
    stats: Optional[Iterable[StatName]] = None,
) -> Dict[StatName, float]:
    """
    d score / d (one unit of each gear stat).

    Args:
        graph: Graph the gradient was computed on
        attribute_gradient: {attribute: d score / d composed value}
        stats: Stats to report (all stats when None)

    Returns:
        {stat: derivative per unit of stat value}
    """
    result = {}
    for stat in stats if stats is not None else STAT_DEFINITIONS:
        definition = STAT_DEFINITIONS[stat]
        components = graph.component_gradient(attribute_gradient, definition.attribute)
        if definition.component == StatComponent.PERCENTAGE:
            result[stat] = components['percentage']
        else:
            result[stat] = components['flat']
    return result


def roll_values(
    graph: AttributeGraph,
    attribute_gradient: Dict[AttributeName, float],
    stats: Optional[Iterable[StatName]] = None,
) -> Dict[StatName, float]:
    """
    First-order score gain of one max sub stat roll per stat.

    Formula:
        RollValue = d score / d stat * MaxSubRoll
    """
    stats = list(stats) if stats is not None else SUB_STATS
    gradient = stat_gradient(graph, attribute_gradient, stats)
    return {stat: gradient[stat] * STAT_DEFINITIONS[stat].max_sub_roll for stat in stats}


def sensitivity_table(
    graph: AttributeGraph,
    attribute_gradient: Dict[AttributeName, float],
    opt_config=None,
) -> pd.DataFrame:
    """
    Sub stat ranking as a DataFrame, best roll first.

    Columns:
        stat, display_name, roll_size (one max roll, formatted), gradient,
        roll_value, importance (roll value relative to the best stat), and
        weight (from opt_config, when given)

    Note:
        The store scales flat inputs by the percentage bonus, so ATK_FIXED,
        HP_FIXED and DEF_FIXED rolls rank higher here than they would in game,
        where flat stats are not multiplied by the matching % bonus. Read the
        ranking as relative to this model, not as game-accurate.
    """
    gradient = stat_gradient(graph, attribute_gradient, SUB_STATS)
    rolls = roll_values(graph, attribute_gradient, SUB_STATS)
    best = max((abs(v) for v in rolls.values()), default=0.0)
    weights = opt_config.stat_weights() if opt_config is not None else {}

    rows: List[Dict] = []
    for stat in SUB_STATS:
        definition = get_stat_definition(stat)
        rows.append({
            "stat": stat.value,
            "display_name": get_stat_display_name(stat),
            "roll_size": definition.format_value(definition.max_sub_roll),
            "gradient": gradient[stat],
            "roll_value": rolls[stat],
            "importance": rolls[stat] / best if best > 0 else 0.0,
            "weight": weights.get(stat, np.nan),
        })

    df = pd.DataFrame(rows)
    return df.sort_values("roll_value", ascending=False).reset_index(drop=True)


# =============================================================================
# FINITE DIFFERENCES
# =============================================================================

def finite_difference(
    graph_factory: Callable[[], AttributeGraph],
    target: AttributeName,
    source: AttributeName,
    step: float = 1e-4,
) -> float:
    """
    Central difference of value(target) w.r.t. the composed value of source.

    The composed value is shifted by adjusting the flat input, scaled by the
    percentage so the shift is exactly +/- step.

    Args:
        graph_factory: Returns a fresh, unqueried graph each call
        target: Output attribute
        source: Perturbed attribute
        step: Shift of the composed value

    Returns:
        (value(+step) - value(-step)) / (2 * step)
    """
    def shifted(delta: float) -> float:
        graph = graph_factory()
        percentage = graph.get_entry(source).percentage
        graph.add_flat(source, delta / (1 + percentage))
        return graph.get_value(target)

    values = np.array([shifted(-step), shifted(step)])
    return float(np.diff(values)[0] / (2 * step))


def gradient_check(
    graph_factory: Callable[[], AttributeGraph],
    target: AttributeName,
    step: float = 1e-4,
    rtol: float = 1e-6,
    atol: float = 1e-9,
) -> pd.DataFrame:
    """
    Compare propagate_gradient() with finite differences for every source.

    Returns:
        DataFrame with attribute, analytic, numeric and ok columns
    """
    analytic = graph_factory().propagate_gradient(target)
    names = list(analytic)
    numeric = np.array([finite_difference(graph_factory, target, name, step) for name in names])
    expected = np.array([analytic[name] for name in names])

    return pd.DataFrame({
        "attribute": [name.value for name in names],
        "analytic": expected,
        "numeric": numeric,
        "ok": np.isclose(expected, numeric, rtol=rtol, atol=atol),
    })


__all__ = [
    'stat_gradient',
    'roll_values',
    'sensitivity_table',
    'finite_difference',
    'gradient_check',
]
