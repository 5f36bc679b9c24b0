"""
Unit tests for weapons.py, artifacts.py and build.py - populating the graph for one build.
"""
import pytest

from genshin_calc.artifacts import (
    ARTIFACT_CONFIG_DATA,
    FIXED_MAIN_STATS,
    Artifact,
    ArtifactEffectConfig,
    ArtifactSetName,
    ArtifactSlot,
    apply_artifacts,
    count_sets,
)
from genshin_calc.build import BuildContext, apply_buff, create_attribute_graph, evaluate
from genshin_calc.characters import Character, CharacterCommonData, IneffaConfig
from genshin_calc.core.attribute import AttributeGraph
from genshin_calc.core.constants import AttributeName, WeaponType
from genshin_calc.skill_tables import CharacterName
from genshin_calc.stat_names import StatName
from genshin_calc.target_functions import MaxAtkTargetFunction
from genshin_calc.weapons import WEAPON_CONFIG_DATA, Weapon, WeaponCommonData, WeaponName

ER_SUB_90 = 0.12 * 4.592


def _ineffa(**kwargs) -> Character:
    return Character(CharacterCommonData(CharacterName.INEFFA, **kwargs))


def _klee(**kwargs) -> Character:
    return Character(CharacterCommonData(CharacterName.KLEE, **kwargs))


def _weapon(name: WeaponName, config=None, **kwargs) -> Weapon:
    return Weapon(WeaponCommonData(name, **kwargs), config)


def _four_piece(set_name: ArtifactSetName) -> list:
    return [
        Artifact(set_name, ArtifactSlot.FLOWER, StatName.HP_FIXED),
        Artifact(set_name, ArtifactSlot.FEATHER, StatName.ATK_FIXED),
        Artifact(set_name, ArtifactSlot.SAND, StatName.ATK_PERCENTAGE),
        Artifact(set_name, ArtifactSlot.GOBLET, StatName.DEF_PERCENTAGE),
    ]


def _bare_graph(er: float = 1.0) -> AttributeGraph:
    graph = AttributeGraph()
    graph.set_base(AttributeName.ATK, 1000.0)
    graph.set_base(AttributeName.ENERGY_RECHARGE, er)
    return graph


class TestWeaponData:
    """Base ATK, sub stat and validation."""

    def test_level_90(self):
        common = WeaponCommonData(WeaponName.ENGULFING_LIGHTNING)
        assert common.base_atk == 608
        stat, value = common.sub_stat()
        assert stat == StatName.RECHARGE
        assert value == pytest.approx(ER_SUB_90)

    def test_four_star_curve(self):
        assert WeaponCommonData(WeaponName.FAVONIUS_LANCE).base_atk == 565

    def test_level_1_sub_stat(self):
        _, value = WeaponCommonData(WeaponName.STAFF_OF_HOMA, level=1).sub_stat()
        assert value == pytest.approx(0.144)

    @pytest.mark.parametrize("refine", [0, 6])
    def test_invalid_refine(self, refine):
        with pytest.raises(ValueError):
            WeaponCommonData(WeaponName.STAFF_OF_HOMA, refine=refine)

    def test_invalid_level(self):
        with pytest.raises(ValueError):
            WeaponCommonData(WeaponName.STAFF_OF_HOMA, level=95)

    def test_wrong_weapon_type(self):
        with pytest.raises(ValueError):
            create_attribute_graph(_ineffa(), _weapon(WeaponName.LOST_PRAYER_TO_THE_SACRED_WINDS), [])


class TestWeaponPassives:
    """Passives registered as flat modifiers or edges."""

    def test_engulfing_lightning(self):
        graph = create_attribute_graph(_ineffa(), _weapon(WeaponName.ENGULFING_LIGHTNING), [])
        base_atk = 330 + 608
        er = 1 + ER_SUB_90
        atk = base_atk + base_atk * 0.28 * (er - 1)
        assert graph.get_value(AttributeName.ENERGY_RECHARGE) == pytest.approx(er)
        assert graph.get_value(AttributeName.ATK) == pytest.approx(atk)
        assert graph.get_value(AttributeName.ELEMENTAL_MASTERY) == pytest.approx(0.06 * atk)
        assert graph.get_value(AttributeName.CRITICAL_RATE) == pytest.approx(0.05 + 0.192)

    def test_engulfing_lightning_cap(self):
        base_atk = 330 + 608
        graph = create_attribute_graph(
            _ineffa(), _weapon(WeaponName.ENGULFING_LIGHTNING), [],
            buffs=[(StatName.RECHARGE, 3.0)],
        )
        assert graph.get_value(AttributeName.ATK) == pytest.approx(base_atk * 1.8)
        gradient = graph.propagate_gradient(AttributeName.ATK)
        assert gradient[AttributeName.ENERGY_RECHARGE] == 0.0

    def test_engulfing_lightning_burst_uptime(self):
        graph = create_attribute_graph(
            _ineffa(), _weapon(WeaponName.ENGULFING_LIGHTNING, {"rate": 1.0}), [],
        )
        assert graph.get_value(AttributeName.ENERGY_RECHARGE) == pytest.approx(1.3 + ER_SUB_90)

    def test_staff_of_homa(self):
        graph = create_attribute_graph(_ineffa(), _weapon(WeaponName.STAFF_OF_HOMA), [])
        hp = 12613 * 1.2
        assert graph.get_value(AttributeName.HP) == pytest.approx(hp)
        assert graph.get_value(AttributeName.ATK) == pytest.approx(938 + 0.018 * hp)
        assert graph.get_value(AttributeName.CRITICAL_DAMAGE) == pytest.approx(0.5 + 0.144 * 4.592)

    def test_staff_of_homa_chain_gradient(self):
        """HP reaches EM through ATK: 0.06 * 0.018."""
        graph = create_attribute_graph(_ineffa(), _weapon(WeaponName.STAFF_OF_HOMA), [])
        gradient = graph.propagate_gradient(AttributeName.ELEMENTAL_MASTERY)
        assert gradient[AttributeName.HP] == pytest.approx(0.06 * 0.018)

    def test_staff_of_homa_refine(self):
        graph = create_attribute_graph(
            _ineffa(), _weapon(WeaponName.STAFF_OF_HOMA, {"be50_rate": 0.0}, refine=5), [],
        )
        hp = 12613 * 1.4
        assert graph.get_value(AttributeName.ATK) == pytest.approx(938 + 0.016 * hp)

    def test_lost_prayer(self):
        graph = create_attribute_graph(_klee(), _weapon(WeaponName.LOST_PRAYER_TO_THE_SACRED_WINDS), [])
        assert graph.get_value(AttributeName.BONUS_PYRO) == pytest.approx(0.288 + 0.32)
        assert graph.get_value(AttributeName.BONUS_HYDRO) == pytest.approx(0.32)
        assert graph.get_value(AttributeName.BONUS_PHYSICAL) == 0.0

    def test_no_passive(self):
        graph = create_attribute_graph(_ineffa(), _weapon(WeaponName.FAVONIUS_LANCE), [])
        assert graph.get_value(AttributeName.ATK) == pytest.approx(330 + 565)


class TestArtifacts:
    """Pieces, stats and set bonuses."""

    def test_default_main_value(self):
        artifact = Artifact(ArtifactSetName.GLADIATORS_FINALE, ArtifactSlot.FEATHER, StatName.ATK_FIXED)
        assert artifact.main_value == 311.0

    def test_too_many_sub_stats(self):
        subs = [(StatName.CRITICAL_RATE, 0.03), (StatName.CRITICAL_DAMAGE, 0.06),
                (StatName.ATK_PERCENTAGE, 0.05), (StatName.RECHARGE, 0.05),
                (StatName.ELEMENTAL_MASTERY, 20.0)]
        with pytest.raises(ValueError):
            Artifact(ArtifactSetName.GLADIATORS_FINALE, ArtifactSlot.FLOWER, StatName.HP_FIXED, subs)

    def test_sub_duplicates_main(self):
        with pytest.raises(ValueError):
            Artifact(ArtifactSetName.GLADIATORS_FINALE, ArtifactSlot.FLOWER, StatName.HP_FIXED,
                     [(StatName.HP_FIXED, 200.0)])

    @pytest.mark.parametrize("slot,main", [
        (ArtifactSlot.FLOWER, StatName.ATK_PERCENTAGE),
        (ArtifactSlot.FLOWER, StatName.ATK_FIXED),
        (ArtifactSlot.FEATHER, StatName.HP_FIXED),
    ])
    def test_fixed_slot_wrong_main(self, slot, main):
        with pytest.raises(ValueError):
            Artifact(ArtifactSetName.GLADIATORS_FINALE, slot, main)

    def test_fixed_slot_mains(self):
        for slot, main in FIXED_MAIN_STATS.items():
            assert Artifact(ArtifactSetName.GLADIATORS_FINALE, slot, main).main_stat == main

    def test_repeated_sub_stat(self):
        subs = [(StatName.CRITICAL_RATE, 0.039), (StatName.CRITICAL_RATE, 0.039)]
        with pytest.raises(ValueError, match="only once"):
            Artifact(ArtifactSetName.GLADIATORS_FINALE, ArtifactSlot.SAND, StatName.ATK_PERCENTAGE, subs)

    def test_main_only_stat_as_sub(self):
        """Elemental bonuses only roll as goblet main stats."""
        with pytest.raises(ValueError, match="sub stat"):
            Artifact(ArtifactSetName.GLADIATORS_FINALE, ArtifactSlot.SAND, StatName.ATK_PERCENTAGE,
                     [(StatName.PYRO_BONUS, 0.05)])

    def test_config_metadata_is_immutable(self):
        assert isinstance(ARTIFACT_CONFIG_DATA, tuple)
        for items in WEAPON_CONFIG_DATA.values():
            assert isinstance(items, tuple)

    def test_duplicate_slot(self):
        pieces = [Artifact(ArtifactSetName.GLADIATORS_FINALE, ArtifactSlot.FLOWER, StatName.HP_FIXED)] * 2
        with pytest.raises(ValueError):
            apply_artifacts(_bare_graph(), pieces, WeaponType.POLEARM)

    def test_stats_land_in_store(self):
        piece = Artifact(ArtifactSetName.GLADIATORS_FINALE, ArtifactSlot.SAND, StatName.ATK_PERCENTAGE,
                         [(StatName.ATK_FIXED, 19.45), (StatName.CRITICAL_RATE, 0.035)])
        graph = _bare_graph()
        apply_artifacts(graph, [piece], WeaponType.POLEARM)
        entry = graph.get_entry(AttributeName.ATK)
        assert entry.flat == pytest.approx(19.45)
        assert entry.percentage == pytest.approx(0.466)
        assert graph.get_value(AttributeName.CRITICAL_RATE) == pytest.approx(0.035)

    def test_count_sets(self):
        pieces = _four_piece(ArtifactSetName.NOBLESSE_OBLIGE)
        assert count_sets(pieces) == {ArtifactSetName.NOBLESSE_OBLIGE: 4}

    def test_gladiator_melee_only(self):
        melee = _bare_graph()
        apply_artifacts(melee, _four_piece(ArtifactSetName.GLADIATORS_FINALE), WeaponType.POLEARM)
        ranged = _bare_graph()
        apply_artifacts(ranged, _four_piece(ArtifactSetName.GLADIATORS_FINALE), WeaponType.CATALYST)
        assert melee.get_value(AttributeName.BONUS_NORMAL_ATTACK) == pytest.approx(0.35)
        assert ranged.get_value(AttributeName.BONUS_NORMAL_ATTACK) == 0.0
        assert melee.get_entry(AttributeName.ATK).percentage == pytest.approx(0.466 + 0.18)

    def test_two_piece_only(self):
        graph = _bare_graph()
        apply_artifacts(graph, _four_piece(ArtifactSetName.CRIMSON_WITCH_OF_FLAMES)[:2], WeaponType.CATALYST)
        assert graph.get_value(AttributeName.BONUS_PYRO) == pytest.approx(0.15)
        assert graph.get_value(AttributeName.ENHANCE_MELT) == 0.0

    def test_crimson_witch_stacks(self):
        graph = _bare_graph()
        config = ArtifactEffectConfig(crimson_witch_stack=3)
        apply_artifacts(graph, _four_piece(ArtifactSetName.CRIMSON_WITCH_OF_FLAMES), WeaponType.CATALYST, config)
        assert graph.get_value(AttributeName.BONUS_PYRO) == pytest.approx(0.15 + 0.225)
        assert graph.get_value(AttributeName.ENHANCE_VAPORIZE) == pytest.approx(0.15)

    def test_gilded_dreams_defaults(self):
        graph = _bare_graph()
        apply_artifacts(graph, _four_piece(ArtifactSetName.GILDED_DREAMS), WeaponType.POLEARM)
        assert graph.get_value(AttributeName.ELEMENTAL_MASTERY) == pytest.approx(80 + 150)

    def test_emblem_edge(self):
        graph = _bare_graph()
        apply_artifacts(graph, _four_piece(ArtifactSetName.EMBLEM_OF_SEVERED_FATE), WeaponType.POLEARM)
        assert graph.get_value(AttributeName.BONUS_ELEMENTAL_BURST) == pytest.approx(0.25 * 1.2)
        gradient = graph.propagate_gradient(AttributeName.BONUS_ELEMENTAL_BURST)
        assert gradient[AttributeName.ENERGY_RECHARGE] == pytest.approx(0.25)

    def test_emblem_cap(self):
        graph = _bare_graph(er=3.5)
        apply_artifacts(graph, _four_piece(ArtifactSetName.EMBLEM_OF_SEVERED_FATE), WeaponType.POLEARM)
        assert graph.get_value(AttributeName.BONUS_ELEMENTAL_BURST) == pytest.approx(0.75)

    def test_config_from_dict(self):
        config = ArtifactEffectConfig.from_dict({"gilded_dreams_same_count": "2", "noblesse_oblige_rate": 5})
        assert config.gilded_dreams_same_count == 2
        assert config.noblesse_oblige_rate == 1.0
        assert config.gilded_dreams_diff_count == 3


class TestBuild:
    """create_attribute_graph, buffs and BuildContext."""

    def test_buffs(self):
        graph = AttributeGraph()
        apply_buff(graph, StatName.ATK_PERCENTAGE, 0.2)
        apply_buff(graph, AttributeName.DEF_MINUS, 0.1)
        assert graph.get_entry(AttributeName.ATK).percentage == pytest.approx(0.2)
        assert graph.get_value(AttributeName.DEF_MINUS) == pytest.approx(0.1)

    def test_character_config_override(self):
        character = Character(CharacterCommonData(CharacterName.INEFFA), IneffaConfig(True))
        graph = create_attribute_graph(
            character, _weapon(WeaponName.FAVONIUS_LANCE), [], character_config=IneffaConfig(False),
        )
        assert graph.get_value(AttributeName.ELEMENTAL_MASTERY) == 0.0

    def test_artifact_order_does_not_matter(self):
        pieces = _four_piece(ArtifactSetName.GLADIATORS_FINALE)
        forward = create_attribute_graph(_ineffa(), _weapon(WeaponName.ENGULFING_LIGHTNING), pieces)
        reverse = create_attribute_graph(_ineffa(), _weapon(WeaponName.ENGULFING_LIGHTNING), pieces[::-1])
        for name, value in forward.snapshot().items():
            assert reverse.get_value(name) == pytest.approx(value)

    def test_context_caches_graph(self):
        context = BuildContext(_ineffa(), _weapon(WeaponName.ENGULFING_LIGHTNING))
        assert context.graph is context.graph

    def test_evaluate(self):
        context = BuildContext(_ineffa(), _weapon(WeaponName.FAVONIUS_LANCE))
        assert evaluate(context, MaxAtkTargetFunction()) == pytest.approx(330 + 565)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
