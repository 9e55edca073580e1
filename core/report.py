from __future__ import annotations

import random
from typing import Iterable, List, Optional, Sequence

from .cards import Card
from .equity import estimate_equity
from .evaluator import evaluate_best
from .models import ActionRecord, Actor, ReportEntry
from .opponents import pot_odds

PASSIVE_ACTIONS = {"CHECK", "CALL"}
AGGRESSIVE_ACTIONS = {"RAISE", "ALL_IN"}


def made_category(hole_cards: Sequence[Card], board: Sequence[Card]) -> int:
    """Hand category of hole cards plus board; preflop only a pocket pair counts."""
    cards = list(hole_cards) + list(board)
    if len(cards) >= 5:
        return evaluate_best(cards).category
    ranks = [card.value for card in cards]
    return 1 if len(ranks) != len(set(ranks)) else 0


def ev_advice(record: ActionRecord, equity: float) -> str:
    if record.action == "FOLD":
        if equity > 0.25:
            return "Folding may be too tight; your equity was decent."
        return "Folding is reasonable with low equity."
    if record.action in PASSIVE_ACTIONS:
        # A check costs nothing, so any equity above 5% grades as a good call.
        if equity > pot_odds(record.chips, record.pot) + 0.05:
            return "Good call based on equity."
        if record.action == "CHECK":
            return "Checking is fine."
        return "Calling may be unprofitable based on pot odds."
    if equity > 0.5:
        return "Aggressive play with strong equity."
    return "Bluff/semi-bluff; ensure you have fold equity."


def disguise_advice(record: ActionRecord, category: int) -> str:
    if category >= 5 and record.action in PASSIVE_ACTIONS:
        return "You under-represented a strong hand (good for trapping)."
    if category <= 1 and record.action in AGGRESSIVE_ACTIONS:
        return "You represented strength while weak (bluffing)."
    if category >= 5 and record.action in AGGRESSIVE_ACTIONS:
        return "Your strong hand was evident; consider mixing in checks to disguise."
    return "Normal play."


def build_report(
    action_log: Iterable[ActionRecord],
    samples: int = 100,
    rng: Optional[random.Random] = None,
    actor: Actor = Actor.PLAYER,
) -> List[ReportEntry]:
    rng = rng or random.Random()
    entries: List[ReportEntry] = []
    for record in action_log:
        if record.actor is not actor:
            continue
        equity = estimate_equity(record.hole_cards, record.board, samples, rng=rng)
        category = made_category(record.hole_cards, record.board)
        entries.append(
            ReportEntry(
                stage=record.stage,
                action=record.action,
                chips_committed=record.chips,
                equity=equity,
                ev_advice=ev_advice(record, equity),
                disguise_advice=disguise_advice(record, category),
            )
        )
    return entries
