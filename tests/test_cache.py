import threading

import pytest

from builders import HELMET_ITEM, SNAPSHOT, make_result
from roggler_core.aggregation import BasetypeResult
from roggler_core.cache import FilterState, Generation, ResultCache, TopLevelCache, combo_key, signature
from roggler_core.dictionary import DictionarySet
from roggler_core.dimensions import DimensionProcessor
from roggler_core.errors import InsufficientData, StaleGeneration


def helmet_state(**axes):
    return FilterState(snapshot_id=SNAPSHOT, items={HELMET_ITEM}, **axes)


def empty_processed(total=100):
    return DimensionProcessor().process_result(make_result({"secondascendancy": [(0, total)]}), DictionarySet())


def test_signature_is_order_independent():
    a = helmet_state(basetypes=["Lion Pelt", "Leather Cap"], skills=["Arc", "Cyclone"])
    b = helmet_state(basetypes=("Leather Cap", "Lion Pelt"), skills={"Cyclone", "Arc"})
    assert signature(a) == signature(b)
    assert a == b


def test_signature_distinguishes_axes():
    assert signature(helmet_state(skills=["X"])) != signature(helmet_state(modifiers=["X"]))


def test_basetypes_require_single_item():
    with pytest.raises(ValueError):
        FilterState(snapshot_id=SNAPSHOT, basetypes=["Leather Cap"])
    with pytest.raises(ValueError):
        FilterState(snapshot_id=SNAPSHOT, items=["Rare Helmet", "Rare Boots"], modifiers=["Life"])


def test_selecting_different_item_clears_basetypes():
    state = helmet_state(basetypes=["Leather Cap"], modifiers=["Life"], skills=["Arc"])
    assert state.with_item(HELMET_ITEM) is state
    boots = state.with_item("Rare Boots")
    assert boots.basetypes == frozenset()
    assert boots.modifiers == frozenset()
    assert boots.skills == frozenset(["Arc"])
    assert boots.category == "Boots"


def test_combo_key_ignores_basetypes():
    assert combo_key(helmet_state(basetypes=["Leather Cap"])) == combo_key(helmet_state())


def test_item_only_empty_result_is_not_cached():
    cache = ResultCache()
    state = helmet_state()
    warning = cache.put_combination(state, empty_processed())
    assert isinstance(warning, InsufficientData)
    assert warning.signature == signature(state)
    assert cache.get_combination(state) is None


def test_skill_filtered_empty_result_is_cached():
    cache = ResultCache()
    state = helmet_state(skills=["Cyclone"])
    result = empty_processed()
    assert cache.put_combination(state, result) is None
    assert cache.get_combination(state) is result


def test_item_only_result_with_breakdown_is_cached():
    cache = ResultCache()
    state = helmet_state()
    dictionaries = DictionarySet()
    result = DimensionProcessor().process_result(make_result({"skills": [(0, 3)]}, total=3), dictionaries)
    assert cache.put_combination(state, result) is None
    assert cache.get_combination(state) is result


def test_stale_write_is_rejected():
    generation = Generation()
    cache = ResultCache(generation)
    token = generation.current
    generation.advance()
    with pytest.raises(StaleGeneration):
        cache.put_combination(helmet_state(skills=["Arc"]), empty_processed(), token)
    assert cache.get_combination(helmet_state(skills=["Arc"])) is None


def test_partition_by_basetype_cache():
    cache = ResultCache()
    state = helmet_state(basetypes=["Leather Cap", "Lion Pelt", "Iron Hat"])
    cached = BasetypeResult("Lion Pelt", make_result({}), DictionarySet(), 10)
    cache.put_basetype(state, cached)

    hits, misses = cache.partition(state, ["Leather Cap", "Lion Pelt", "Iron Hat"])
    assert hits == {"Lion Pelt": cached}
    assert misses == ["Leather Cap", "Iron Hat"]
    assert cache.has_basetype(helmet_state(), "Lion Pelt")
    assert not cache.has_basetype(helmet_state(skills=["Arc"]), "Lion Pelt")


def test_stats_counts_hits_and_misses():
    cache = ResultCache()
    state = helmet_state(skills=["Arc"])
    cache.get_combination(state)
    cache.put_combination(state, empty_processed())
    cache.get_combination(state)
    stats = cache.stats()
    assert stats["hits"] == 1
    assert stats["misses"] == 1
    assert stats["combinations"] == 1


def test_top_level_cache_evicts_oldest():
    cache = TopLevelCache(capacity=3)
    for snapshot in ("a", "b", "c"):
        cache.put(snapshot, snapshot.upper())
    cache.put("a", "A2")
    cache.put("d", "D")
    assert "b" not in cache
    assert cache.get("a") == "A2"
    assert len(cache) == 3


def test_top_level_cache_default_capacity():
    cache = TopLevelCache()
    for i in range(101):
        cache.put(str(i), i)
    assert len(cache) == 100
    assert "0" not in cache
    assert cache.get("100") == 100


def test_top_level_cache_rejects_zero_capacity():
    with pytest.raises(ValueError):
        TopLevelCache(capacity=0)


def test_generation_holding_blocks_advance():
    generation = Generation()
    generation.advance()
    with generation.holding(1) as current:
        worker = threading.Thread(target=generation.advance)
        worker.start()
        worker.join(timeout=0.1)
        assert worker.is_alive()
        assert current == 1
        assert generation.current == 1
    worker.join(timeout=2)
    assert generation.current == 2


def test_generation_holding_rejects_stale_token():
    generation = Generation()
    generation.advance()
    with pytest.raises(StaleGeneration):
        with generation.holding(0):
            pass
