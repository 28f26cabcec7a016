import logging
import random

from balance import CivBalance, STAT_MAX, STAT_MIN
from cards import Card, StatModifier, StatType
from sim import events
from sim.civilization import Civilization


def _make_civ(**kwargs) -> Civilization:
    return Civilization(id="c0", name="Test", personality="cautious", **kwargs)


def test_starting_stats_and_tech_quirk():
    civ = _make_civ()
    assert (civ.survival, civ.tech, civ.faith) == (50, 10, 50)
    assert civ.alive
    assert civ.hand == []

    # tech argument is accepted but always replaced by the configured start
    civ = _make_civ(survival=70, tech=90, faith=30)
    assert (civ.survival, civ.tech, civ.faith) == (70, 10, 30)


def test_constructor_clamps_and_starts_alive():
    civ = _make_civ(survival=0, faith=500)
    assert civ.survival == 0
    assert civ.faith == 100
    assert civ.alive

    civ = _make_civ(survival=-20)
    assert civ.survival == 0
    assert civ.alive


def test_clamp_to_zero_kills():
    civ = _make_civ()
    civ.apply_modifier(StatModifier(StatType.SURVIVAL, -1000))
    assert civ.survival == 0
    assert not civ.alive
    assert civ.is_extinct


def test_clamp_to_max():
    civ = _make_civ()
    civ.apply_modifier(StatModifier(StatType.TECH, 40))
    assert civ.tech == 50
    civ.apply_modifier(StatModifier(StatType.TECH, 1000))
    assert civ.tech == 100


def test_extinction_is_terminal():
    civ = _make_civ()
    civ.apply_modifier(StatModifier(StatType.SURVIVAL, -50))
    assert not civ.alive
    civ.apply_modifier(StatModifier(StatType.SURVIVAL, 30))
    assert civ.survival == 30
    assert not civ.alive


def test_card_modifiers_apply_in_order():
    civ = _make_civ()
    card = Card("doom", "Doom", modifiers=(
        StatModifier(StatType.SURVIVAL, -60),
        StatModifier(StatType.SURVIVAL, 10),
    ))
    civ.apply_card(card)
    assert civ.survival == 10
    assert not civ.alive

    civ = _make_civ()
    reversed_card = Card("doom2", "Doom", modifiers=(
        StatModifier(StatType.SURVIVAL, 10),
        StatModifier(StatType.SURVIVAL, -60),
    ))
    civ.apply_card(reversed_card)
    assert civ.survival == 0
    assert not civ.alive


def test_other_stats_never_kill_or_leak():
    civ = _make_civ()
    civ.apply_modifier(StatModifier(StatType.TECH, -1000))
    civ.apply_modifier(StatModifier(StatType.FAITH, -1000))
    assert civ.tech == 0
    assert civ.faith == 0
    assert civ.survival == 50
    assert civ.alive

    civ.apply_modifier(StatModifier(StatType.TECH, 7))
    assert civ.survival == 50
    assert civ.faith == 0


def test_empty_card_is_noop():
    civ = _make_civ()
    before = (civ.stats, civ.alive)
    raised = civ.apply_card(Card("idle", "Idle"))
    assert raised == []
    assert (civ.stats, civ.alive) == before


def test_bounds_hold_for_random_deltas():
    rng = random.Random(7)
    civ = _make_civ()
    for _ in range(2000):
        stat = rng.choice(list(StatType))
        delta = rng.randint(-250, 250)
        civ.apply_modifier(StatModifier(stat, delta))
        for value in civ.stats.values():
            assert STAT_MIN <= value <= STAT_MAX


def test_events_returned_and_emitted():
    civ = _make_civ()
    seen = []
    civ.subscribe(seen.append)

    raised = civ.apply_modifier(StatModifier(StatType.SURVIVAL, -80))
    assert [e.type for e in raised] == [events.STAT_CHANGED, events.CIV_EXTINCT]
    assert seen == raised
    changed = raised[0].payload
    assert changed["old_value"] == 50
    assert changed["new_value"] == 0
    assert changed["change"] == -50
    assert changed["delta"] == -80
    assert raised[1].payload == {"civ_id": "c0", "name": "Test"}

    # Hitting zero again does not repeat the extinction event
    raised = civ.apply_modifier(StatModifier(StatType.SURVIVAL, -5))
    assert [e.type for e in raised] == [events.STAT_CHANGED]

    civ.unsubscribe(seen.append)
    civ.apply_modifier(StatModifier(StatType.FAITH, 1))
    assert len(seen) == 3


def test_extinction_logged_once(caplog):
    caplog.set_level(logging.INFO, logger="sim.civilization")
    civ = _make_civ()
    civ.apply_modifier(StatModifier(StatType.SURVIVAL, -100))
    civ.apply_modifier(StatModifier(StatType.SURVIVAL, -100))
    msgs = [r.getMessage() for r in caplog.records if "extinct" in r.getMessage()]
    assert msgs == ["Test has gone extinct!"]


def test_hand_is_left_alone():
    card = Card("forage", "Forage", modifiers=(StatModifier(StatType.SURVIVAL, 5),))
    civ = _make_civ()
    civ.hand.extend([card, card])
    civ.apply_card(card)
    assert civ.hand == [card, card]
    assert civ.to_dict()["hand"] == ["forage", "forage"]


def test_custom_balance():
    bal = CivBalance(initial_survival=80, initial_tech=25, initial_faith=5)
    civ = _make_civ(balance=bal, tech=99)
    assert (civ.survival, civ.tech, civ.faith) == (80, 25, 5)


def test_summary_and_snapshot():
    civ = _make_civ()
    civ.apply_modifier(StatModifier(StatType.SURVIVAL, -50))
    assert "extinct" in civ.summary()
    data = civ.to_dict()
    assert data["alive"] is False
    assert data["personality"] == "cautious"
    assert civ.get_stat(StatType.FAITH) == data["faith"]


def test_failing_listener_is_logged(caplog):
    civ = _make_civ()

    def boom(event):
        raise RuntimeError("listener failed")

    civ.subscribe(boom)
    with caplog.at_level(logging.ERROR, logger="sim.civilization"):
        civ.apply_modifier(StatModifier(StatType.TECH, 1))
    assert civ.tech == 11
    assert any(r.exc_info for r in caplog.records if r.levelno == logging.ERROR)


def test_failing_listener_does_not_hide_extinction():
    civ = _make_civ()
    seen = []

    def flaky(event):
        if event.type == events.STAT_CHANGED:
            raise RuntimeError("listener failed")

    civ.subscribe(flaky)
    civ.subscribe(seen.append)
    card = Card("doom", "Doom", modifiers=(
        StatModifier(StatType.SURVIVAL, -60),
        StatModifier(StatType.FAITH, 5),
    ))
    raised = civ.apply_card(card)

    assert not civ.alive
    assert civ.faith == 55
    assert [e.type for e in seen] == [
        events.STAT_CHANGED, events.CIV_EXTINCT, events.STAT_CHANGED,
    ]
    assert seen == raised
