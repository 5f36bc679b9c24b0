"""
Genshin Calc - Build Construction
=================================
Entry point that turns character, weapon and artifacts into an attribute
graph ready for query, and the context object the optimizer scores.

Order of application:
    1. Base values (character + weapon base ATK, base HP/DEF, base crit/recharge)
    2. Character ascension stat and weapon sub stat
    3. Artifact stats and set bonuses
    4. Weapon passive
    5. Character talent/constellation effects
    6. External buffs

The resolved values do not depend on this order; it only fixes which
edges exist before the first query freezes the graph.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Tuple, Union

from .artifacts import Artifact, ArtifactEffectConfig, apply_artifacts
from .characters import Character
from .core.attribute import AttributeGraph
from .core.constants import (
    AttributeName,
    BASE_CRITICAL_DAMAGE,
    BASE_CRITICAL_RATE,
    BASE_ENERGY_RECHARGE,
)
from .core.enemy import Enemy, EnemyResolver
from .stat_names import StatName, apply_stat
from .weapons import Weapon

# An external buff is either a gear-style stat or a flat bonus to an attribute
Buff = Tuple[Union[StatName, AttributeName], float]


def apply_buff(graph: AttributeGraph, key: Union[StatName, AttributeName], value: float) -> None:
    if isinstance(key, StatName):
        apply_stat(graph, key, value)
    else:
        graph.add_flat(key, value)


def create_attribute_graph(
    character: Character,
    weapon: Weapon,
    artifacts: Sequence[Artifact],
    artifact_config: Optional[ArtifactEffectConfig] = None,
    character_config: Any = None,
    buffs: Optional[Sequence[Buff]] = None,
) -> AttributeGraph:
    """
    Populate a fresh attribute graph for one build.

    Args:
        character: Character with level/talent data and its config
        weapon: Equipped weapon
        artifacts: Up to five artifacts
        artifact_config: Conditional set bonus inputs
        character_config: Overrides character.config when given
        buffs: Extra (stat or attribute, value) pairs from outside the build

    Returns:
        AttributeGraph in its mutation phase

    Raises:
        ValueError: if the weapon type does not match the character
    """
    common = character.common_data
    weapon.check_wielder(common.static_data.weapon_type)

    graph = AttributeGraph()

    base_atk = common.base_atk + weapon.common_data.base_atk
    graph.set_base(AttributeName.HP, common.base_hp)
    graph.set_base(AttributeName.ATK, base_atk)
    graph.set_base(AttributeName.DEF, common.base_def)
    graph.set_base(AttributeName.CRITICAL_RATE, BASE_CRITICAL_RATE)
    graph.set_base(AttributeName.CRITICAL_DAMAGE, BASE_CRITICAL_DAMAGE)
    graph.set_base(AttributeName.ENERGY_RECHARGE, BASE_ENERGY_RECHARGE)

    apply_stat(graph, *common.ascension_stat())
    apply_stat(graph, *weapon.common_data.sub_stat())

    apply_artifacts(graph, artifacts, common.static_data.weapon_type, artifact_config)

    weapon.apply_effect(graph, base_atk)

    config = character_config if character_config is not None else character.config
    character.kit.apply_effect(graph, common, config)

    for key, value in buffs or []:
        apply_buff(graph, key, value)

    return graph


@dataclass
class BuildContext:
    """
    One candidate build being scored.

    The graph is created on first access and owned by this context only.
    """
    character: Character
    weapon: Weapon
    artifacts: List[Artifact] = field(default_factory=list)
    enemy: Enemy = field(default_factory=Enemy)
    artifact_config: Optional[ArtifactEffectConfig] = None
    buffs: Optional[List[Buff]] = None
    resolver: Optional[EnemyResolver] = None
    _graph: Optional[AttributeGraph] = field(default=None, init=False, repr=False)

    @property
    def graph(self) -> AttributeGraph:
        if self._graph is None:
            self._graph = create_attribute_graph(
                self.character,
                self.weapon,
                self.artifacts,
                artifact_config=self.artifact_config,
                buffs=self.buffs,
            )
        return self._graph


def evaluate(context: BuildContext, target_function) -> float:
    """Score a build with a target function."""
    return target_function.target(
        context.graph,
        context.character,
        context.weapon,
        context.artifacts,
        context.enemy,
        resolver=context.resolver,
    )


def evaluate_with_gradient(context: BuildContext, target_function):
    """Score a build and return the TargetValue with its attribute gradient."""
    return target_function.target_with_gradient(
        context.graph,
        context.character,
        context.weapon,
        context.artifacts,
        context.enemy,
        resolver=context.resolver,
    )


__all__ = [
    'Buff',
    'apply_buff',
    'create_attribute_graph',
    'BuildContext',
    'evaluate',
    'evaluate_with_gradient',
]
