"""
Unit tests for target_functions.py - rotation scores, gradients and optimizer hints.
"""
import logging

import pytest

from genshin_calc.build import create_attribute_graph
from genshin_calc.characters import (
    Character,
    CharacterCommonData,
    DamageContext,
    IneffaConfig,
    IneffaDamage,
    IneffaSkillConfig,
    get_character_kit,
)
from genshin_calc.core.attribute import AttributeGraph
from genshin_calc.core.constants import AttributeName, Element, SkillType
from genshin_calc.core.damage import DamageBuilder
from genshin_calc.core.enemy import Enemy
from genshin_calc.skill_tables import CharacterName
from genshin_calc.stat_names import SUB_STATS, StatName
from genshin_calc.target_functions import (
    DEFAULT_TARGET_FUNCTION,
    TARGET_FUNCTION_TABLE,
    IneffaDefaultTargetFunction,
    KleeDefaultTargetFunction,
    MaxAtkTargetFunction,
    TargetFunctionConfig,
    TargetFunctionName,
    TargetFunctionOptConfig,
    create_target_function,
    weighted_sum,
)
from genshin_calc.weapons import Weapon, WeaponCommonData, WeaponName


def _ineffa_build(character_config=None, buffs=None):
    character = Character(CharacterCommonData(CharacterName.INEFFA), character_config)
    weapon = Weapon(WeaponCommonData(WeaponName.ENGULFING_LIGHTNING))
    graph = create_attribute_graph(character, weapon, [], buffs=buffs)
    return graph, character, weapon


def _klee_build(buffs=None):
    character = Character(CharacterCommonData(CharacterName.KLEE))
    weapon = Weapon(WeaponCommonData(WeaponName.LOST_PRAYER_TO_THE_SACRED_WINDS))
    graph = create_attribute_graph(character, weapon, [], buffs=buffs)
    return graph, character, weapon


def _score(tf, build) -> float:
    graph, character, weapon = build
    return tf.target(graph, character, weapon, [], Enemy())


class TestWeightedSum:
    """Combining damage results."""

    def test_sum_and_gradient(self):
        graph = AttributeGraph()
        graph.set_base(AttributeName.ATK, 1000.0)
        builder = DamageBuilder()
        builder.add_atk_ratio("Test", 1.0)
        result = builder.damage(graph, Enemy(), Element.PYRO, SkillType.NORMAL_ATTACK, 90)

        score, gradient = weighted_sum([(0.5, result), (1.5, result)])
        assert score == pytest.approx(2.0 * result.expectation)
        assert gradient[AttributeName.ATK] == pytest.approx(2.0 * result.gradient[AttributeName.ATK])

    def test_empty(self):
        assert weighted_sum([]) == (0, {})


class TestIneffaDefault:
    """Ineffa rotation score."""

    def test_formula(self):
        graph, character, weapon = _ineffa_build()
        kit = get_character_kit(CharacterName.INEFFA)
        context = DamageContext(character.common_data, graph, Enemy())
        config = IneffaSkillConfig(overclocking_active=True)

        def expectation(skill):
            return kit.damage(context, skill, config).expectation

        normals = sum(expectation(s) for s in (IneffaDamage.NORMAL1, IneffaDamage.NORMAL2,
                                               IneffaDamage.NORMAL3, IneffaDamage.NORMAL4))
        expected = (normals * 0.4 + expectation(IneffaDamage.SKILL) * 1.8 * 0.8
                    + expectation(IneffaDamage.BURST) * 0.6 + expectation(IneffaDamage.CHARGED) * 0.3)

        tf = IneffaDefaultTargetFunction()
        assert tf.target(graph, character, weapon, [], Enemy()) == pytest.approx(expected)

    def test_deterministic(self):
        build = _ineffa_build()
        tf = IneffaDefaultTargetFunction()
        assert _score(tf, build) == _score(tf, build)

    def test_overclocking_rate_raises_score(self):
        build = _ineffa_build()
        low = _score(IneffaDefaultTargetFunction(overclocking_rate=0.0), build)
        high = _score(IneffaDefaultTargetFunction(overclocking_rate=0.8), build)
        assert low < high

    def test_em_bonus_never_lowers_score(self):
        tf = IneffaDefaultTargetFunction()
        off = _score(tf, _ineffa_build(IneffaConfig(em_bonus_active=False)))
        on = _score(tf, _ineffa_build(IneffaConfig(em_bonus_active=True)))
        assert off <= on

    def test_default_artifact_config(self):
        config = IneffaDefaultTargetFunction().get_default_artifact_config()
        assert config.gilded_dreams_diff_count == 3


class TestKleeDefault:
    """Klee rotation score."""

    def test_spark_rate_raises_score(self):
        build = _klee_build()
        low = _score(KleeDefaultTargetFunction(explosive_spark_rate=0.0), build)
        high = _score(KleeDefaultTargetFunction(explosive_spark_rate=1.0), build)
        assert low < high

    def test_rejects_other_character(self):
        common = CharacterCommonData(CharacterName.INEFFA)
        with pytest.raises(ValueError):
            create_target_function(TargetFunctionName.KLEE_DEFAULT, common,
                                   WeaponCommonData(WeaponName.ENGULFING_LIGHTNING))


class TestGradient:
    """target_with_gradient against central differences of the score."""

    @pytest.mark.parametrize("name,step", [
        (AttributeName.CRITICAL_DAMAGE, 1e-3),
        (AttributeName.ENERGY_RECHARGE, 1e-3),
        (AttributeName.ATK, 1e-1),
        (AttributeName.BONUS_ELECTRO, 1e-3),
    ])
    def test_ineffa(self, name, step):
        """No percentage modifiers on these attributes, so a flat buff shifts the composed value exactly."""
        tf = IneffaDefaultTargetFunction()
        graph, character, weapon = _ineffa_build()
        value = tf.target_with_gradient(graph, character, weapon, [], Enemy())

        plus = _score(tf, _ineffa_build(buffs=[(name, step)]))
        minus = _score(tf, _ineffa_build(buffs=[(name, -step)]))
        numeric = (plus - minus) / (2 * step)
        assert value.gradient[name] == pytest.approx(numeric, rel=1e-5)

    def test_recharge_feeds_atk(self):
        """Engulfing Lightning turns recharge into score."""
        tf = IneffaDefaultTargetFunction()
        graph, character, weapon = _ineffa_build()
        value = tf.target_with_gradient(graph, character, weapon, [], Enemy())
        assert value.gradient[AttributeName.ENERGY_RECHARGE] > 0
        assert value.score == pytest.approx(tf.target(graph, character, weapon, [], Enemy()))

    def test_klee_pyro_bonus(self):
        tf = KleeDefaultTargetFunction()
        graph, character, weapon = _klee_build()
        value = tf.target_with_gradient(graph, character, weapon, [], Enemy())
        step = 1e-3
        plus = _score(tf, _klee_build([(AttributeName.BONUS_PYRO, step)]))
        minus = _score(tf, _klee_build([(AttributeName.BONUS_PYRO, -step)]))
        assert value.gradient[AttributeName.BONUS_PYRO] == pytest.approx((plus - minus) / (2 * step), rel=1e-5)

    def test_max_atk_through_homa(self):
        character = Character(CharacterCommonData(CharacterName.INEFFA))
        weapon = Weapon(WeaponCommonData(WeaponName.STAFF_OF_HOMA))
        graph = create_attribute_graph(character, weapon, [])
        value = MaxAtkTargetFunction().target_with_gradient(graph, character, weapon, [], Enemy())
        assert value.gradient[AttributeName.ATK] == 1.0
        assert value.gradient[AttributeName.HP] == pytest.approx(0.018)


class TestCreate:
    """create_target_function and its config handling."""

    def test_values_are_coerced(self):
        tf = create_target_function(
            TargetFunctionName.INEFFA_DEFAULT,
            CharacterCommonData(CharacterName.INEFFA),
            WeaponCommonData(WeaponName.ENGULFING_LIGHTNING),
            TargetFunctionConfig(TargetFunctionName.INEFFA_DEFAULT, {"overclocking_rate": "0.3"}),
        )
        assert tf == IneffaDefaultTargetFunction(overclocking_rate=0.3)

    def test_values_are_clamped(self):
        tf = create_target_function(
            TargetFunctionName.KLEE_DEFAULT,
            CharacterCommonData(CharacterName.KLEE),
            WeaponCommonData(WeaponName.LOST_PRAYER_TO_THE_SACRED_WINDS),
            TargetFunctionConfig(TargetFunctionName.KLEE_DEFAULT, {"explosive_spark_rate": 5}),
        )
        assert tf.explosive_spark_rate == 1.0

    def test_mismatched_config_uses_defaults(self, caplog):
        with caplog.at_level(logging.WARNING, logger="genshin_calc.target_functions"):
            tf = create_target_function(
                TargetFunctionName.INEFFA_DEFAULT,
                CharacterCommonData(CharacterName.INEFFA),
                WeaponCommonData(WeaponName.ENGULFING_LIGHTNING),
                TargetFunctionConfig(TargetFunctionName.KLEE_DEFAULT, {"explosive_spark_rate": 1.0}),
            )
        assert tf == IneffaDefaultTargetFunction()
        assert "klee_default" in caplog.text

    def test_max_atk_any_character(self):
        for name in CharacterName:
            tf = create_target_function(
                TargetFunctionName.MAX_ATK,
                CharacterCommonData(name),
                WeaponCommonData(WeaponName.FAVONIUS_LANCE),
            )
            assert isinstance(tf, MaxAtkTargetFunction)

    def test_table_is_complete(self):
        for name in TargetFunctionName:
            assert TARGET_FUNCTION_TABLE[name].NAME == name
        for name in CharacterName:
            assert TARGET_FUNCTION_TABLE[DEFAULT_TARGET_FUNCTION[name]].FOR_CHARACTER == name

    def test_config_metadata_is_immutable(self):
        for tf_class in TARGET_FUNCTION_TABLE.values():
            assert isinstance(tf_class.CONFIG, tuple)


class TestOptConfig:
    """Stat weights and threshold classification."""

    def test_ineffa_classification(self):
        config = IneffaDefaultTargetFunction().get_target_function_opt_config()
        assert config.classify(StatName.ELECTRO_BONUS) == "very_critical"
        assert config.classify(StatName.CRITICAL_RATE) == "normal"
        assert config.classify(StatName.RECHARGE) == "ignored"
        assert StatName.ELECTRO_BONUS in config.goblet_main_stats

    def test_critical_band(self):
        config = TargetFunctionOptConfig(atk_percentage=1.6)
        assert config.classify(StatName.ATK_PERCENTAGE) == "critical"

    def test_custom_thresholds(self):
        config = TargetFunctionOptConfig(atk_percentage=1.0, very_critical_threshold=0.9)
        assert config.classify(StatName.ATK_PERCENTAGE) == "very_critical"

    def test_klee_sets(self):
        config = KleeDefaultTargetFunction().get_target_function_opt_config()
        assert config.very_critical_set_names == config.set_names[:1]

    def test_weights_cover_sub_stats(self):
        weights = TargetFunctionOptConfig().stat_weights()
        for stat in SUB_STATS:
            assert stat in weights


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
