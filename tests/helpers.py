from __future__ import annotations

import random
from typing import Iterable, Sequence

from core.cards import Deck, full_deck, parse_cards
from core.game import GameEngine
from core.models import ActionKind, Archetype, StackScenario, TableConfig


def create_engine(
    *,
    scenario: StackScenario = StackScenario.EQUAL,
    archetype: Archetype = Archetype.VALUE_HUNTER,
    seed: int = 42,
    **overrides: int,
) -> GameEngine:
    """Engine with cheap equity settings so opponent turns stay fast."""
    overrides.setdefault("opponent_equity_samples", 20)
    overrides.setdefault("report_equity_samples", 20)
    overrides.setdefault("opponent_delay_ms", 0)
    return GameEngine.start_match(scenario, archetype, rng=random.Random(seed), **overrides)


def engine_with_stacks(player_stack: int, opponent_stack: int, *, big_blind: int = 100, seed: int = 42) -> GameEngine:
    config = TableConfig(
        big_blind=big_blind,
        player_stack=player_stack,
        opponent_stack=opponent_stack,
        opponent_equity_samples=20,
        report_equity_samples=20,
        opponent_delay_ms=0,
    )
    return GameEngine(config, Archetype.VALUE_HUNTER, rng=random.Random(seed))


def stacked_deck(labels: Sequence[str]) -> Deck:
    """Deck dealing ``labels`` first, followed by every other card.

    Deal order is player hole cards, opponent hole cards, burn, flop (3),
    burn, turn, burn, river.
    """
    front = parse_cards(labels)
    used = set(front)
    rest = [card for card in full_deck() if card not in used]
    return Deck(front + rest)


def force_deck(monkeypatch, labels: Sequence[str]) -> None:
    monkeypatch.setattr("core.game.new_shuffled_deck", lambda rng=None: stacked_deck(labels))


def total_chips(engine: GameEngine) -> int:
    return engine.total_chips()


def play_passively(engine: GameEngine) -> None:
    """Both sides check or call until the hand ends."""
    while not engine.is_hand_complete():
        engine.submit_action(engine.hand.turn, ActionKind.CHECK_OR_CALL)


def perform_actions(engine: GameEngine, actions: Iterable[tuple]) -> None:
    """Apply a scripted sequence of (actor, action, amount)."""
    for actor, action, amount in actions:
        engine.submit_action(actor, action, amount)


class FixedRandom(random.Random):
    """Random source whose ``random()`` always returns the same roll."""

    def __init__(self, roll: float) -> None:
        super().__init__(0)
        self.roll = roll

    def random(self) -> float:
        return self.roll
