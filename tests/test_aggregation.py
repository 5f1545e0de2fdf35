import math

import pytest

from builders import make_result
from roggler_core.aggregation import AggregationEngine, BasetypeResult, split_basetypes
from roggler_core.dictionary import DictionarySet
from roggler_core.dimensions import DimensionProcessor
from roggler_core.wire import Dictionary

MODS = Dictionary(values=["Life", "Armour", "Fire Res"])
SKILLS = Dictionary(values=["Cyclone", "Arc"])
BASETYPES = Dictionary(values=["Leather Cap", "Lion Pelt", "Hubris Circlet", "Iron Hat"])


@pytest.fixture
def engine():
    return AggregationEngine(DimensionProcessor())


def dictionaries():
    return DictionarySet({
        "d-itemmods-Helmet": MODS,
        "d-itemmods-explicit": MODS,
        "d-skills": SKILLS,
        "d-itembasetypes-Helmet": BASETYPES,
    })


def basetype_result(basetype, true_total, mods=None, explicit=None, skills=None):
    dims = {}
    if mods:
        dims["itemmods-Helmet"] = mods
    if explicit:
        dims["itemmods-explicit"] = explicit
    if skills:
        dims["skills"] = skills
    return BasetypeResult(
        basetype=basetype,
        result=make_result(dims, total=true_total),
        dictionaries=dictionaries(),
        true_total=true_total,
    )


def by_name(entries):
    return {e.name: e for e in entries}


def test_modifier_dedup_keeps_maximum(engine):
    item = basetype_result("Leather Cap", 50, mods=[(0, 5)], explicit=[(0, 12)])
    assert engine.modifier_counts(item) == {"Life": 12}

    aggregate = engine.aggregate_basetypes([item], category="Helmet")
    assert by_name(aggregate.modifiers)["Life"].count == 12


def test_pooled_percentage_is_population_weighted(engine):
    a = basetype_result("Leather Cap", 100, mods=[(0, 50)], skills=[(0, 10)])
    b = basetype_result("Lion Pelt", 300, mods=[(0, 30)], skills=[(0, 90), (1, 20)])
    aggregate = engine.aggregate_basetypes([a, b], category="Helmet")

    assert aggregate.total_builds == 400
    life = by_name(aggregate.modifiers)["Life"]
    assert life.count == 80
    # 80 / 400, not the mean of 50% and 10%
    assert math.isclose(life.percentage, 20.0)
    assert [(s.basetype, s.percentage) for s in life.shares] == [("Leather Cap", 50.0), ("Lion Pelt", 10.0)]

    skills = by_name(aggregate.skills)
    assert skills["Cyclone"].count == 100
    assert math.isclose(skills["Cyclone"].percentage, 25.0)
    assert skills["Arc"].count == 20


def test_basetype_distribution(engine):
    a = basetype_result("Leather Cap", 100)
    b = basetype_result("Lion Pelt", 300)
    aggregate = engine.aggregate_basetypes([a, b], category="Helmet")
    distribution = [(e.name, e.count, e.percentage) for e in aggregate.basetype_distribution]
    assert distribution == [("Lion Pelt", 300, 75.0), ("Leather Cap", 100, 25.0)]


def test_aggregation_is_order_independent(engine):
    a = basetype_result("Leather Cap", 100, mods=[(0, 50), (1, 7)], skills=[(0, 10)])
    b = basetype_result("Lion Pelt", 300, mods=[(0, 30)], explicit=[(2, 40)], skills=[(1, 20)])
    c = basetype_result("Hubris Circlet", 60, mods=[(1, 7), (2, 3)], skills=[(0, 60)])

    direct = engine.aggregate_basetypes([a, b, c], category="Helmet")
    merged = engine.merge_aggregates(
        engine.aggregate_basetypes([a, b], category="Helmet"),
        engine.aggregate_basetypes([c], category="Helmet"),
    )
    reversed_order = engine.aggregate_basetypes([c, b, a], category="Helmet")

    assert merged == direct
    assert reversed_order == direct


def test_merge_rejects_overlap(engine):
    a = basetype_result("Leather Cap", 100)
    with pytest.raises(ValueError):
        engine.merge_aggregates(
            engine.aggregate_basetypes([a], category="Helmet"),
            engine.aggregate_basetypes([a], category="Helmet"),
        )


def test_missing_dictionary_excludes_dimension(engine):
    item = basetype_result("Leather Cap", 100, mods=[(0, 50)], skills=[(0, 10)])
    item.dictionaries = DictionarySet({"d-skills": SKILLS})
    aggregate = engine.aggregate_basetypes([item], category="Helmet")
    assert aggregate.modifiers == []
    assert [w.dictionary_id for w in aggregate.warnings] == ["d-itemmods-Helmet"]
    assert by_name(aggregate.skills)["Cyclone"].count == 10


def test_reconstructed_groups(engine):
    groups = engine.reconstruct_groups("Helmet", ["Leather Cap", "Lion Pelt", "Iron Hat"])
    by_attr = {g.attribute: g for g in groups}
    assert list(by_attr) == ["Dex", "DexInt", "Int", "Str", "StrDex", "StrInt"]
    assert by_attr["Dex"].percentage == 100.0
    assert by_attr["Dex"].selected == ["Lion Pelt", "Leather Cap"]
    assert by_attr["Str"].count == 100
    assert by_attr["Int"].count == 0
    assert by_attr["Int"].percentage == 0.0
    assert all(g.reconstructed for g in groups)


def test_errors_and_skipped_are_reported(engine):
    from roggler_core.errors import FetchError

    error = FetchError("Iron Hat", "HTTP 503", status=503)
    aggregate = engine.aggregate_basetypes(
        [basetype_result("Leather Cap", 10)],
        category="Helmet",
        errors=[error],
        skipped=["Spiked Gloves"],
    )
    assert aggregate.errors == [error]
    assert aggregate.skipped == ["Spiked Gloves"]
    assert aggregate.basetypes == ["Leather Cap"]


def test_split_basetypes_blacklist_and_cap():
    basetypes = ["A", "Spiked Gloves", "B", "C", "D", "E", "F", "G"]
    allowed, skipped = split_basetypes(basetypes, blacklist=["Spiked Gloves"], limit=6)
    assert allowed == ["A", "B", "C", "D", "E", "F"]
    assert skipped == ["Spiked Gloves", "G"]


# Cross-call merge

def processed(processor, dims, total):
    dictionaries = DictionarySet({
        "d-itembasetypes-Helmet": BASETYPES,
        "d-skills": SKILLS,
        "d-secondascendancy": Dictionary(values=["Juggernaut", "Slayer"]),
    })
    return processor.process_result(make_result(dims, total=total), dictionaries)


def test_merge_calls_unions_and_renormalises(engine):
    processor = engine.processor
    first = processed(processor, {
        "secondascendancy": [(0, 60), (1, 40)],
        "skills": [(0, 50)],
        "itembasetypes-Helmet": [(0, 30), (1, 10)],
    }, total=999)
    second = processed(processor, {
        "secondascendancy": [(0, 100)],
        "skills": [(0, 25), (1, 75)],
        "itembasetypes-Helmet": [(0, 20), (3, 50)],
    }, total=999)

    merged = engine.merge_calls([first, second])
    assert merged.true_total == 200

    skills = {e.name: e for e in merged.get("skills").entries}
    assert skills["Cyclone"].count == 75
    assert math.isclose(skills["Cyclone"].percentage, 37.5)
    assert math.isclose(skills["Arc"].percentage, 37.5)

    helmets = merged.get("itembasetypes-Helmet")
    dex = helmets.entries[0]
    assert dex.name == "Dex Helmet (2 types)"
    assert dex.count == 60
    assert {m.name: m.count for m in dex.members} == {"Lion Pelt": 10, "Leather Cap": 50}
    assert math.isclose(dex.percentage, 30.0)


def test_merge_calls_order_independent(engine):
    processor = engine.processor
    a = processed(processor, {"skills": [(0, 5), (1, 1)]}, total=10)
    b = processed(processor, {"skills": [(1, 9)]}, total=20)
    forward = engine.merge_calls([a, b])
    backward = engine.merge_calls([b, a])
    assert {e.name: e.count for e in forward.get("skills").entries} == \
        {e.name: e.count for e in backward.get("skills").entries}
