import threading

import pytest

from builders import HELMET_ITEM, SNAPSHOT, make_result, with_refs
from roggler_core.cache import FilterState
from roggler_core.dictionary import DictionaryLoader
from roggler_core.fetch import BatchFetcher, UpstreamQuery, dictionary_path
from roggler_core.wire import DictionaryRef, WireDecoder


def helmet_query(basetype):
    state = FilterState(snapshot_id=SNAPSHOT, items={HELMET_ITEM}, basetypes={basetype})
    return UpstreamQuery.from_filter(state, label=basetype)


@pytest.fixture
def fetcher(transport):
    decoder = WireDecoder()
    return BatchFetcher(transport, decoder, DictionaryLoader(decoder))


# Query intents

def test_params_follow_upstream_order():
    state = FilterState(
        snapshot_id=SNAPSHOT,
        items={HELMET_ITEM},
        basetypes={"Lion Pelt", "Leather Cap"},
        modifiers={"Life"},
        skills={"Cyclone"},
    )
    query = UpstreamQuery.from_filter(state)
    assert query.params() == [
        ("items", "Rare Helmet"),
        ("itembasetypes-Helmet", "Leather Cap"),
        ("itembasetypes-Helmet", "Lion Pelt"),
        ("itemmods-Helmet", "Life"),
        ("skills", "Cyclone"),
        ("overview", "keepers"),
        ("type", "exp"),
    ]
    assert query.path == f"/poe1/api/builds/{SNAPSHOT}/search"
    assert query.label == query.signature


def test_top_level_query_has_no_filters():
    query = UpstreamQuery.top_level(SNAPSHOT)
    assert query.params() == [("overview", "keepers"), ("type", "exp")]
    assert query.url("https://poe.ninja/") == (
        f"https://poe.ninja/poe1/api/builds/{SNAPSHOT}/search?overview=keepers&type=exp"
    )


def test_equivalent_states_build_identical_queries():
    a = FilterState(snapshot_id=SNAPSHOT, items={HELMET_ITEM}, basetypes=["b", "a"])
    b = FilterState(snapshot_id=SNAPSHOT, items={HELMET_ITEM}, basetypes=["a", "b"])
    assert UpstreamQuery.from_filter(a) == UpstreamQuery.from_filter(b)


def test_dictionary_path():
    assert dictionary_path("abc") == "/poe1/api/builds/dictionary/abc"


# Batch fetching

def serve_helmets(transport, basetypes):
    for i, basetype in enumerate(basetypes):
        result = with_refs(make_result({"secondascendancy": [(0, 10 * (i + 1))], "skills": [(0, i + 1)]}))
        transport.serve(helmet_query(basetype), result)


def test_sequential_batch_reports_progress(transport, fetcher):
    basetypes = ["Leather Cap", "Lion Pelt", "Iron Hat"]
    serve_helmets(transport, basetypes)
    progress = []
    batch = fetcher.run([helmet_query(b) for b in basetypes], on_progress=lambda *p: progress.append(p))

    assert progress == [(1, 3, "Leather Cap"), (2, 3, "Lion Pelt"), (3, 3, "Iron Hat")]
    assert [o.label for o in batch.outcomes] == basetypes
    assert all(o.ok for o in batch.outcomes)
    assert batch.outcomes[1].result.get_dimension("secondascendancy").count_sum == 20
    assert batch.outcomes[0].dictionaries.get("d-skills").values[0] == "Cyclone"


def test_one_failure_does_not_abort_batch(transport, fetcher):
    basetypes = ["Leather Cap", "Lion Pelt", "Iron Hat"]
    serve_helmets(transport, basetypes)
    transport.fail_labels.add("Lion Pelt")
    batch = fetcher.run([helmet_query(b) for b in basetypes])

    assert [o.ok for o in batch.outcomes] == [True, False, True]
    assert [e.label for e in batch.errors] == ["Lion Pelt"]
    assert batch.errors[0].status == 503
    assert len(batch.successes()) == 2


def test_malformed_response_is_isolated(transport, fetcher):
    serve_helmets(transport, ["Leather Cap"])
    transport.serve_raw(helmet_query("Iron Hat"), bytes([0x0A, 0x40, 0x08]))
    batch = fetcher.run([helmet_query("Iron Hat"), helmet_query("Leather Cap")])
    assert not batch.outcomes[0].ok
    assert "malformed" in str(batch.outcomes[0].error)
    assert batch.outcomes[1].ok


def test_dictionary_failure_is_recorded(transport, fetcher):
    serve_helmets(transport, ["Leather Cap"])
    transport.fail_labels.add("hash-skills")
    outcome = fetcher.fetch_one(helmet_query("Leather Cap"))
    assert outcome.ok
    assert [e.label for e in outcome.dictionary_errors] == ["hash-skills"]
    assert "d-skills" not in outcome.dictionaries


def test_dictionaries_are_memoised_by_hash(transport, fetcher):
    basetypes = ["Leather Cap", "Lion Pelt"]
    serve_helmets(transport, basetypes)
    fetcher.run([helmet_query(b) for b in basetypes])
    assert transport.fetch_count("hash-skills") == 1
    assert fetcher.loader.stats()["hits"] >= 1


def test_abandoned_batch_is_marked_cancelled(transport, fetcher):
    basetypes = ["Leather Cap", "Lion Pelt", "Iron Hat"]
    serve_helmets(transport, basetypes)
    checks = iter([True, False])
    batch = fetcher.run([helmet_query(b) for b in basetypes], should_continue=lambda: next(checks, False))
    assert batch.cancelled
    assert [o.cancelled for o in batch.outcomes] == [False, True, True]
    assert transport.fetch_count("Lion Pelt") == 0


def test_parallel_batch_keeps_input_order(transport):
    basetypes = ["Leather Cap", "Lion Pelt", "Iron Hat", "Hubris Circlet"]
    serve_helmets(transport, basetypes)
    release = threading.Event()

    def hold_first(query):
        if query.label == "Leather Cap":
            release.wait(timeout=2)
        elif query.label == "Hubris Circlet":
            release.set()

    transport.on_fetch = hold_first
    decoder = WireDecoder()
    fetcher = BatchFetcher(transport, decoder, DictionaryLoader(decoder), max_workers=4)
    progress = []
    batch = fetcher.run([helmet_query(b) for b in basetypes], on_progress=lambda *p: progress.append(p))

    assert [o.label for o in batch.outcomes] == basetypes
    assert all(o.ok for o in batch.outcomes)
    assert [p[0] for p in progress] == [1, 2, 3, 4]


def test_loader_wraps_malformed_dictionary(transport):
    transport.dictionaries["broken"] = bytes([0x12, 0x09, 0x41])
    loader = DictionaryLoader(WireDecoder())
    dictionaries, errors = loader.load([DictionaryRef(id="x", hash="broken")], transport)
    assert len(dictionaries) == 0
    assert errors[0].label == "broken"
    assert "malformed" in str(errors[0])


def test_loader_rejects_zero_capacity():
    with pytest.raises(ValueError):
        DictionaryLoader(WireDecoder(), max_entries=0)


def test_loader_evicts_oldest_hash(transport):
    loader = DictionaryLoader(WireDecoder(), max_entries=2)
    for h in ("hash-bt", "hash-mods", "hash-skills"):
        loader.load([DictionaryRef(id=h, hash=h)], transport)
    assert loader.stats()["entries"] == 2
    loader.load([DictionaryRef(id="bt", hash="hash-bt")], transport)
    assert transport.fetch_count("hash-bt") == 2
