from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .cards import Card
from .equity import estimate_equity
from .models import ActionKind, Archetype, Stage

# Opponent decisions are a pure function of the table situation plus an
# injected random source. Raise amounts are chips added on top of the call.

SHORT_STACK_BB = 10


@dataclass(frozen=True)
class Situation:
    stage: Stage
    hole_cards: List[Card]
    board: List[Card]
    to_call: int
    pot: int
    stack: int
    hero_stack: int
    big_blind: int


@dataclass(frozen=True)
class Decision:
    action: ActionKind
    amount: Optional[int] = None

    @classmethod
    def fold(cls) -> "Decision":
        return cls(ActionKind.FOLD)

    @classmethod
    def check_or_call(cls) -> "Decision":
        return cls(ActionKind.CHECK_OR_CALL)

    @classmethod
    def shove(cls) -> "Decision":
        return cls(ActionKind.ALL_IN)

    @classmethod
    def raise_by(cls, amount: int) -> "Decision":
        return cls(ActionKind.RAISE, amount)


@dataclass(frozen=True)
class OpenRule:
    min_strength: float
    frequency: float
    sizes_bb: Sequence[int]


# Preflop opening thresholds per archetype.
OPEN_RULES = {
    Archetype.AGGRESSIVE_CALLER: OpenRule(0.4, 0.7, (2, 3)),
    Archetype.SMALL_BALL_TECHNICIAN: OpenRule(0.5, 0.5, (2,)),
    Archetype.TANK_ANALYZER: OpenRule(0.6, 0.6, (3,)),
    Archetype.VALUE_HUNTER: OpenRule(0.55, 0.7, (3,)),
    Archetype.SHORT_STACK_GLADIATOR: OpenRule(0.55, 0.6, (3,)),
}


def starting_hand_strength(cards: Sequence[Card]) -> float:
    """Rough 0..1 score for two hole cards: pairs, high cards, suited connectors."""
    if len(cards) != 2:
        raise ValueError("Starting hand strength needs exactly two cards")
    first, second = cards
    if first.value == second.value:
        return 0.2 + 0.8 * (first.value / 14)

    high = max(first.value, second.value)
    low = min(first.value, second.value)
    score = 0.5 * (high / 14) + 0.1 * (low / 14)
    if first.suit == second.suit:
        score += 0.1
    gap = high - low
    if gap == 1:
        score += 0.1
    elif gap == 2:
        score += 0.05
    return min(score, 1.0)


def pot_odds(to_call: int, pot: int) -> float:
    if to_call <= 0:
        return 0.0
    return to_call / (pot + to_call)


def decide(
    archetype: Archetype,
    situation: Situation,
    rng: Optional[random.Random] = None,
    equity_samples: int = 150,
) -> Decision:
    rng = rng or random.Random()
    archetype = Archetype(archetype)
    equity = estimate_equity(situation.hole_cards, situation.board, equity_samples, rng=rng)
    odds = pot_odds(situation.to_call, situation.pot)

    if archetype is Archetype.SHORT_STACK_GLADIATOR and situation.stack < SHORT_STACK_BB * situation.big_blind:
        return _push_fold(situation, equity, odds)
    if situation.stage is Stage.PRE_FLOP:
        return _preflop(archetype, situation, equity, odds, rng)
    return _postflop(archetype, situation, equity, odds, rng)


def _push_fold(situation: Situation, equity: float, odds: float) -> Decision:
    if situation.to_call == 0:
        return Decision.shove() if equity > 0.48 else Decision.check_or_call()
    return Decision.shove() if equity > odds + 0.1 else Decision.fold()


def _preflop(
    archetype: Archetype,
    situation: Situation,
    equity: float,
    odds: float,
    rng: random.Random,
) -> Decision:
    roll = rng.random()
    bb = situation.big_blind
    if situation.to_call == 0:
        rule = OPEN_RULES[archetype]
        strength = starting_hand_strength(situation.hole_cards)
        if strength >= rule.min_strength and roll < rule.frequency:
            return Decision.raise_by(bb * rng.choice(rule.sizes_bb))
        return Decision.check_or_call()

    if equity > odds + 0.1:
        if archetype is Archetype.AGGRESSIVE_CALLER and roll < 0.2:
            return Decision.raise_by(bb * 2)
        return Decision.check_or_call()
    return Decision.fold()


def _postflop(
    archetype: Archetype,
    situation: Situation,
    equity: float,
    odds: float,
    rng: random.Random,
) -> Decision:
    bb = situation.big_blind
    if situation.to_call > 0:
        if equity > odds + 0.05:
            return Decision.check_or_call()
        # Draw-heavy spots get the occasional bluff-raise.
        if archetype is Archetype.AGGRESSIVE_CALLER and equity > 0.25 and rng.random() < 0.3:
            return Decision.raise_by(_small_bet(bb, rng))
        return Decision.fold()

    if equity > 0.6:
        return Decision.raise_by(_small_bet(bb, rng))
    if equity > 0.3 and rng.random() < 0.4:
        return Decision.raise_by(_small_bet(bb, rng))
    return Decision.check_or_call()


def _small_bet(big_blind: int, rng: random.Random) -> int:
    """1-2 big blinds."""
    return int(big_blind * (1 + rng.random()))
