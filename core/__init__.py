"""Heads-up poker engine: cards, evaluation, equity, betting and opponents."""

from .cards import Card, Deck, RANKS, SUITS, new_shuffled_deck, parse_cards, remaining_after_excluding
from .equity import estimate_equity, simulate
from .errors import DeckExhausted, DegenerateEquityPool, EngineError, InvalidAction, NotYourTurn
from .evaluator import HandRank, compare, evaluate_best
from .game import GameEngine, HandContext, MatchState
from .models import ActionKind, Actor, Archetype, Stage, StackScenario, TableConfig

__all__ = [
    "Card",
    "Deck",
    "RANKS",
    "SUITS",
    "new_shuffled_deck",
    "parse_cards",
    "remaining_after_excluding",
    "estimate_equity",
    "simulate",
    "DeckExhausted",
    "DegenerateEquityPool",
    "EngineError",
    "InvalidAction",
    "NotYourTurn",
    "HandRank",
    "compare",
    "evaluate_best",
    "GameEngine",
    "HandContext",
    "MatchState",
    "ActionKind",
    "Actor",
    "Archetype",
    "Stage",
    "StackScenario",
    "TableConfig",
]
