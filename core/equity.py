"""Monte Carlo equity of a hand against an unseen (or fixed) opponent hand."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional, Sequence

from .cards import Card, remaining_after_excluding
from .errors import DegenerateEquityPool
from .evaluator import compare

__all__ = ["EquityTally", "estimate_equity", "simulate"]


@dataclass(frozen=True)
class EquityTally:
    wins: int
    ties: int
    losses: int

    @property
    def trials(self) -> int:
        return self.wins + self.ties + self.losses

    @property
    def equity(self) -> float:
        if not self.trials:
            return 0.0
        return (self.wins + self.ties / 2) / self.trials


def simulate(
    hero_cards: Sequence[Card],
    board: Sequence[Card],
    samples: int,
    rng: Optional[random.Random] = None,
    villain_cards: Optional[Sequence[Card]] = None,
) -> EquityTally:
    """Complete the board ``samples`` times and tally hero's results.

    Every trial samples from the same untouched pool, so trials are independent
    of each other and of the live deck. When ``villain_cards`` is omitted the
    opponent's hole cards are drawn at random as well.
    """
    if samples <= 0:
        raise ValueError("samples must be positive")
    if len(hero_cards) != 2:
        raise ValueError("Hero must hold exactly two cards")
    if len(board) > 5:
        raise ValueError("Board cannot have more than 5 cards")
    if villain_cards is not None and len(villain_cards) != 2:
        raise ValueError("Villain must hold exactly two cards")

    known = list(hero_cards) + list(board) + list(villain_cards or [])
    if len(set(known)) != len(known):
        raise ValueError("Duplicate cards in equity request")

    rng = rng or random.Random()
    pool = remaining_after_excluding(known)
    board_needed = 5 - len(board)
    draws = board_needed + (0 if villain_cards is not None else 2)
    if len(pool) < draws:
        raise DegenerateEquityPool(
            f"Need {draws} unseen cards but only {len(pool)} remain"
        )

    wins = ties = losses = 0
    for _ in range(samples):
        drawn = rng.sample(pool, draws) if draws else []
        if villain_cards is None:
            villain, fill = drawn[:2], drawn[2:]
        else:
            villain, fill = list(villain_cards), drawn
        outcome = compare(hero_cards, villain, list(board) + fill)
        if outcome > 0:
            wins += 1
        elif outcome == 0:
            ties += 1
        else:
            losses += 1
    return EquityTally(wins=wins, ties=ties, losses=losses)


def estimate_equity(
    hero_cards: Sequence[Card],
    board: Sequence[Card],
    samples: int,
    rng: Optional[random.Random] = None,
    villain_cards: Optional[Sequence[Card]] = None,
) -> float:
    return simulate(hero_cards, board, samples, rng=rng, villain_cards=villain_cards).equity
