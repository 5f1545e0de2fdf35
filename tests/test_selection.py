import pytest

from roggler_core.errors import SelectionError
from roggler_core.selection import SelectionState, SelectionStateMachine
from roggler_core.storage import MemoryPreferenceStore

COMBO = "snap|items=Rare Helmet|basetypes=|modifiers=|skills="


@pytest.fixture
def preferences():
    return MemoryPreferenceStore()


def test_initial_state_is_collapsed():
    assert SelectionStateMachine().state == SelectionState.COLLAPSED


def test_expand_toggle_apply_cycle(preferences):
    machine = SelectionStateMachine(preferences)
    assert machine.expand("Helmet", "Dex", COMBO) == SelectionState.PREVIEWING

    assert machine.toggle("Lion Pelt") is None
    assert machine.state == SelectionState.PENDING
    machine.toggle("Leather Cap")
    assert machine.pending.items == {"Lion Pelt", "Leather Cap"}

    commit = machine.apply()
    assert commit.basetypes == frozenset(["Lion Pelt", "Leather Cap"])
    assert not commit.auto_applied
    assert machine.state == SelectionState.PREVIEWING
    assert machine.active == commit.basetypes
    # stored in priority order
    assert preferences.get("Helmet", "group_dex_helmet", COMBO) == ["Lion Pelt", "Leather Cap"]


def test_cancel_keeps_active_filter():
    machine = SelectionStateMachine()
    machine.set_active(["Lion Pelt"])
    machine.expand("Helmet", "Dex", COMBO)
    machine.toggle("Leather Cap")
    assert machine.pending.items == {"Lion Pelt", "Leather Cap"}
    assert machine.cancel()
    assert machine.pending is None
    assert machine.active == frozenset(["Lion Pelt"])
    assert machine.state == SelectionState.PREVIEWING


def test_invalid_transitions_are_ignored():
    machine = SelectionStateMachine()
    assert machine.apply() is None
    assert machine.cancel() is False
    assert machine.toggle("Lion Pelt") is None
    assert machine.reset() is None
    assert machine.state == SelectionState.COLLAPSED


def test_toggle_foreign_member_raises():
    machine = SelectionStateMachine()
    machine.expand("Helmet", "Dex", COMBO)
    with pytest.raises(SelectionError):
        machine.toggle("Iron Hat")


def test_expand_unknown_group_raises():
    with pytest.raises(SelectionError):
        SelectionStateMachine().expand("Helmet", "Wis", COMBO)


def test_conflicting_expansion_discards_pending():
    machine = SelectionStateMachine()
    machine.expand("Helmet", "Dex", COMBO)
    machine.toggle("Lion Pelt")
    machine.expand("Helmet", "Int", COMBO)
    assert machine.state == SelectionState.PREVIEWING
    assert machine.pending is None


def test_collapse():
    machine = SelectionStateMachine()
    machine.expand("Helmet", "Dex", COMBO)
    machine.toggle("Lion Pelt")
    assert machine.collapse() == SelectionState.COLLAPSED
    assert machine.pending is None


def test_reset_prefers_saved_preference(preferences):
    preferences.set("Helmet", "group_dex_helmet", COMBO, ["Leather Cap", "Not A Helmet"])
    machine = SelectionStateMachine(preferences)
    machine.expand("Helmet", "Dex", COMBO, counts={"Lion Pelt": 99})
    assert machine.reset() == {"Leather Cap"}
    assert machine.state == SelectionState.PENDING


def test_reset_uses_top_counts():
    machine = SelectionStateMachine(top_n=2)
    machine.expand("Helmet", "Dex", COMBO, counts={"Leather Cap": 5, "Lion Pelt": 50, "Wolf Pelt": 20, "Tricorne": 0})
    assert machine.reset() == {"Lion Pelt", "Wolf Pelt"}


def test_reset_falls_back_to_priority_order():
    machine = SelectionStateMachine(top_n=3)
    machine.expand("Helmet", "Dex", COMBO)
    assert machine.reset() == {"Majestic Pelt", "Grizzly Pelt", "Dire Pelt"}


def test_auto_apply_when_all_cached(preferences):
    cached = {"Lion Pelt", "Leather Cap"}
    machine = SelectionStateMachine(preferences, is_cached=lambda b: b in cached)
    machine.expand("Helmet", "Dex", COMBO)

    commit = machine.toggle("Lion Pelt")
    assert commit is not None
    assert commit.auto_applied
    assert commit.basetypes == frozenset(["Lion Pelt"])
    assert machine.state == SelectionState.PREVIEWING
    assert preferences.get("Helmet", "group_dex_helmet", COMBO) == ["Lion Pelt"]


def test_no_auto_apply_when_any_uncached():
    machine = SelectionStateMachine(is_cached=lambda b: b == "Lion Pelt")
    machine.expand("Helmet", "Dex", COMBO)
    machine.set_active(["Lion Pelt"])
    assert machine.toggle("Leather Cap") is None
    assert machine.state == SelectionState.PENDING


def test_no_auto_apply_on_empty_pending():
    machine = SelectionStateMachine(is_cached=lambda b: True)
    machine.set_active(["Lion Pelt"])
    machine.expand("Helmet", "Dex", COMBO)
    assert machine.toggle("Lion Pelt") is None
    assert machine.pending.items == set()
