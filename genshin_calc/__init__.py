"""
Genshin Calc
============
Build scoring for Genshin Impact: attribute graph with gradients, damage
expectation and target functions.

Typical flow:
    graph = create_attribute_graph(character, weapon, artifacts)
    tf = create_target_function(TargetFunctionName.INEFFA_DEFAULT, character.common_data, weapon.common_data)
    score = tf.target(graph, character, weapon, artifacts, Enemy())
"""

from .core import (
    AttributeName,
    Element,
    SkillType,
    WeaponType,
    AttributeGraph,
    EdgeRule,
    Enemy,
    DamageBuilder,
    DamageResult,
    GenshinCalcError,
    AttributeCycleError,
    SkillLevelError,
    STANDARD_RESOLVER,
    NEUTRAL_RESOLVER,
)
from .stat_names import StatName
from .skill_tables import CharacterName
from .characters import Character, CharacterCommonData, DamageContext, get_character_kit
from .weapons import Weapon, WeaponCommonData, WeaponName
from .artifacts import Artifact, ArtifactEffectConfig, ArtifactSetName, ArtifactSlot
from .build import BuildContext, create_attribute_graph, evaluate, evaluate_with_gradient
from .target_functions import (
    TargetFunctionName,
    TargetFunctionConfig,
    TargetValue,
    create_target_function,
)

__version__ = "0.1.0"

__all__ = [
    'AttributeName',
    'Element',
    'SkillType',
    'WeaponType',
    'AttributeGraph',
    'EdgeRule',
    'Enemy',
    'DamageBuilder',
    'DamageResult',
    'GenshinCalcError',
    'AttributeCycleError',
    'SkillLevelError',
    'STANDARD_RESOLVER',
    'NEUTRAL_RESOLVER',
    'StatName',
    'CharacterName',
    'Character',
    'CharacterCommonData',
    'DamageContext',
    'get_character_kit',
    'Weapon',
    'WeaponCommonData',
    'WeaponName',
    'Artifact',
    'ArtifactEffectConfig',
    'ArtifactSetName',
    'ArtifactSlot',
    'BuildContext',
    'create_attribute_graph',
    'evaluate',
    'evaluate_with_gradient',
    'TargetFunctionName',
    'TargetFunctionConfig',
    'TargetValue',
    'create_target_function',
]
