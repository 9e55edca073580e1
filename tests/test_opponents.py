import random

import pytest

from core.cards import parse_cards
from core.models import ActionKind, Archetype, Stage
from core.opponents import Decision, Situation, decide, pot_odds, starting_hand_strength

from .helpers import FixedRandom


def fix_equity(monkeypatch, value: float) -> None:
    monkeypatch.setattr("core.opponents.estimate_equity", lambda *args, **kwargs: value)


def situation(
    *,
    stage=Stage.PRE_FLOP,
    hole=("Ah", "Ad"),
    board=(),
    to_call=0,
    pot=200,
    stack=9_900,
    hero_stack=9_900,
    big_blind=100,
) -> Situation:
    return Situation(
        stage=stage,
        hole_cards=parse_cards(hole),
        board=parse_cards(board),
        to_call=to_call,
        pot=pot,
        stack=stack,
        hero_stack=hero_stack,
        big_blind=big_blind,
    )


FLOP = ("2c", "7d", "Jh")


def test_starting_hand_strength_orders_typical_hands():
    aces = starting_hand_strength(parse_cards(["Ah", "Ad"]))
    ace_king_suited = starting_hand_strength(parse_cards(["As", "Ks"]))
    deuces = starting_hand_strength(parse_cards(["2h", "2d"]))
    seven_deuce = starting_hand_strength(parse_cards(["7h", "2d"]))

    assert aces == pytest.approx(1.0)
    assert ace_king_suited == pytest.approx(0.5 + 0.1 * 13 / 14 + 0.2)
    assert aces > ace_king_suited > deuces > seven_deuce
    with pytest.raises(ValueError):
        starting_hand_strength(parse_cards(["Ah"]))


def test_pot_odds():
    assert pot_odds(50, 150) == pytest.approx(0.25)
    assert pot_odds(0, 500) == 0.0


def test_gladiator_pushes_or_folds_when_short(monkeypatch):
    short = dict(stack=900, to_call=0)
    fix_equity(monkeypatch, 0.5)
    assert decide(Archetype.SHORT_STACK_GLADIATOR, situation(**short), FixedRandom(0.9)) == Decision.shove()
    fix_equity(monkeypatch, 0.4)
    assert decide(Archetype.SHORT_STACK_GLADIATOR, situation(**short), FixedRandom(0.0)) == Decision.check_or_call()

    facing = dict(stack=900, to_call=100, pot=300)
    fix_equity(monkeypatch, 0.4)
    assert decide(Archetype.SHORT_STACK_GLADIATOR, situation(**facing), FixedRandom(0.9)) == Decision.shove()
    fix_equity(monkeypatch, 0.3)
    assert decide(Archetype.SHORT_STACK_GLADIATOR, situation(**facing), FixedRandom(0.0)) == Decision.fold()


def test_gladiator_push_fold_applies_post_flop_too(monkeypatch):
    fix_equity(monkeypatch, 0.7)
    decision = decide(
        Archetype.SHORT_STACK_GLADIATOR,
        situation(stage=Stage.TURN, board=FLOP + ("Qs",), stack=500),
        FixedRandom(0.9),
    )
    assert decision.action is ActionKind.ALL_IN


def test_deep_gladiator_plays_normal_preflop_rules(monkeypatch):
    fix_equity(monkeypatch, 0.8)
    decision = decide(Archetype.SHORT_STACK_GLADIATOR, situation(stack=5_000), FixedRandom(0.1))
    assert decision == Decision.raise_by(300)


def test_value_hunter_opens_strong_hands_at_its_frequency(monkeypatch):
    fix_equity(monkeypatch, 0.85)
    assert decide(Archetype.VALUE_HUNTER, situation(), FixedRandom(0.1)) == Decision.raise_by(300)
    assert decide(Archetype.VALUE_HUNTER, situation(), FixedRandom(0.9)) == Decision.check_or_call()


def test_weak_hands_never_open(monkeypatch):
    fix_equity(monkeypatch, 0.35)
    for archetype in Archetype:
        decision = decide(archetype, situation(hole=("7h", "2d")), FixedRandom(0.0))
        assert decision == Decision.check_or_call(), archetype


@pytest.mark.parametrize(
    "archetype, sizes",
    [
        (Archetype.AGGRESSIVE_CALLER, {200, 300}),
        (Archetype.SMALL_BALL_TECHNICIAN, {200}),
        (Archetype.TANK_ANALYZER, {300}),
        (Archetype.VALUE_HUNTER, {300}),
    ],
)
def test_open_raise_sizes_follow_archetype(monkeypatch, archetype, sizes):
    fix_equity(monkeypatch, 0.85)
    decision = decide(archetype, situation(), FixedRandom(0.0))
    assert decision.action is ActionKind.RAISE
    assert decision.amount in sizes


def test_preflop_facing_a_bet_calls_with_enough_equity(monkeypatch):
    facing = situation(to_call=50, pot=150)
    fix_equity(monkeypatch, 0.6)
    assert decide(Archetype.TANK_ANALYZER, facing, FixedRandom(0.1)) == Decision.check_or_call()
    fix_equity(monkeypatch, 0.3)
    assert decide(Archetype.TANK_ANALYZER, facing, FixedRandom(0.1)) == Decision.fold()


def test_aggressive_caller_sometimes_reraises_preflop(monkeypatch):
    facing = situation(to_call=50, pot=150)
    fix_equity(monkeypatch, 0.6)
    assert decide(Archetype.AGGRESSIVE_CALLER, facing, FixedRandom(0.1)) == Decision.raise_by(200)
    assert decide(Archetype.AGGRESSIVE_CALLER, facing, FixedRandom(0.5)) == Decision.check_or_call()


def test_postflop_facing_a_bet(monkeypatch):
    facing = situation(stage=Stage.FLOP, board=FLOP, to_call=100, pot=200)
    fix_equity(monkeypatch, 0.5)
    assert decide(Archetype.VALUE_HUNTER, facing, FixedRandom(0.1)) == Decision.check_or_call()

    fix_equity(monkeypatch, 0.3)
    assert decide(Archetype.VALUE_HUNTER, facing, FixedRandom(0.1)) == Decision.fold()
    assert decide(Archetype.AGGRESSIVE_CALLER, facing, FixedRandom(0.1)) == Decision.raise_by(110)
    assert decide(Archetype.AGGRESSIVE_CALLER, facing, FixedRandom(0.5)) == Decision.fold()


def test_postflop_without_a_bet(monkeypatch):
    unopened = situation(stage=Stage.RIVER, board=FLOP + ("Qs", "3c"))
    fix_equity(monkeypatch, 0.7)
    assert decide(Archetype.SMALL_BALL_TECHNICIAN, unopened, FixedRandom(0.5)) == Decision.raise_by(150)

    fix_equity(monkeypatch, 0.4)
    assert decide(Archetype.SMALL_BALL_TECHNICIAN, unopened, FixedRandom(0.1)) == Decision.raise_by(110)
    assert decide(Archetype.SMALL_BALL_TECHNICIAN, unopened, FixedRandom(0.9)) == Decision.check_or_call()

    fix_equity(monkeypatch, 0.2)
    assert decide(Archetype.SMALL_BALL_TECHNICIAN, unopened, FixedRandom(0.0)) == Decision.check_or_call()


def test_decisions_with_real_equity_are_legal_for_every_archetype():
    rng = random.Random(9)
    for archetype in Archetype:
        for spot in (situation(to_call=50, pot=150), situation(stage=Stage.FLOP, board=FLOP)):
            decision = decide(archetype, spot, rng, equity_samples=30)
            assert decision.action in ActionKind
            if decision.action is ActionKind.RAISE:
                assert decision.amount is not None and decision.amount >= 0


def test_decide_accepts_archetype_names(monkeypatch):
    fix_equity(monkeypatch, 0.1)
    assert decide("tank_analyzer", situation(to_call=50, pot=150), FixedRandom(0.5)) == Decision.fold()
