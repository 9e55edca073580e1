from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .cards import Card


class Stage(str, Enum):
    PRE_FLOP = "PRE_FLOP"
    FLOP = "FLOP"
    TURN = "TURN"
    RIVER = "RIVER"
    SHOWDOWN = "SHOWDOWN"


class Actor(str, Enum):
    PLAYER = "PLAYER"
    OPPONENT = "OPPONENT"

    def other(self) -> "Actor":
        return Actor.OPPONENT if self is Actor.PLAYER else Actor.PLAYER


class ActionKind(str, Enum):
    FOLD = "FOLD"
    CHECK_OR_CALL = "CHECK_OR_CALL"
    ALL_IN = "ALL_IN"
    RAISE = "RAISE"


class StackScenario(str, Enum):
    EQUAL = "equal"
    SHORT = "short"
    BIG = "big"

    @property
    def stacks_in_bb(self) -> tuple[int, int]:
        """(player, opponent) starting stacks in big blinds."""
        return {
            StackScenario.EQUAL: (100, 100),
            StackScenario.SHORT: (20, 20),
            StackScenario.BIG: (150, 50),
        }[self]


class Archetype(str, Enum):
    AGGRESSIVE_CALLER = "aggressive_caller"
    SMALL_BALL_TECHNICIAN = "small_ball_technician"
    TANK_ANALYZER = "tank_analyzer"
    VALUE_HUNTER = "value_hunter"
    SHORT_STACK_GLADIATOR = "short_stack_gladiator"

    @property
    def blurb(self) -> str:
        return _BLURBS[self]


_BLURBS = {
    Archetype.AGGRESSIVE_CALLER: (
        "Aggressive Caller: plays many hands, calls down with top or middle pair "
        "and occasionally traps with strong hands."
    ),
    Archetype.SMALL_BALL_TECHNICIAN: (
        "Small-ball Technician: prefers small pots, check-raises and makes precise value bets."
    ),
    Archetype.TANK_ANALYZER: (
        "Tank Analyzer: deliberate decision making, values thin bets and may trap with disguised monsters."
    ),
    Archetype.VALUE_HUNTER: (
        "Value Hunter: raises strong hands for value, check-raises draws and makes courageous calls."
    ),
    Archetype.SHORT_STACK_GLADIATOR: (
        "Short-Stack Gladiator: push-fold specialist; shoves wide when stacks are shallow."
    ),
}


@dataclass
class TableConfig:
    big_blind: int = 100
    player_stack: int = 10_000
    opponent_stack: int = 10_000
    opponent_equity_samples: int = 150
    report_equity_samples: int = 100
    opponent_delay_ms: int = 500

    @property
    def small_blind(self) -> int:
        return self.big_blind // 2

    @classmethod
    def for_scenario(cls, scenario: StackScenario, big_blind: int = 100, **overrides: int) -> "TableConfig":
        player_bb, opponent_bb = StackScenario(scenario).stacks_in_bb
        return cls(
            big_blind=big_blind,
            player_stack=player_bb * big_blind,
            opponent_stack=opponent_bb * big_blind,
            **overrides,
        )


@dataclass
class PlayerSeat:
    actor: Actor
    stack: int
    current_bet: int = 0
    folded: bool = False
    hole_cards: List[Card] = field(default_factory=list)

    def reset_for_hand(self) -> None:
        self.current_bet = 0
        self.folded = False
        self.hole_cards.clear()

    def reset_for_round(self) -> None:
        self.current_bet = 0


@dataclass
class ActionRecord:
    stage: Stage
    actor: Optional[Actor]
    action: str
    chips: int
    to_call: int
    pot: int
    board: List[Card]
    hole_cards: List[Card]
    result: Optional[str] = None

    def to_payload(self) -> dict:
        return {
            "stage": self.stage.value,
            "actor": self.actor.value if self.actor else None,
            "action": self.action,
            "chips": self.chips,
            "to_call": self.to_call,
            "pot": self.pot,
            "board": [card.label for card in self.board],
            "result": self.result,
        }


@dataclass
class PublicView:
    hand_id: Optional[str]
    stage: Optional[Stage]
    pot: int
    board: List[Card]
    player_stack: int
    opponent_stack: int
    player_bet: int
    opponent_bet: int
    button: Optional[Actor]
    turn: Optional[Actor]
    to_call: int
    suggested_raise: int
    player_cards: List[Card]
    opponent_cards_visible: bool
    opponent_cards: Optional[List[Card]]
    player_share: float
    opponent_share: float
    player_stack_bb: float
    opponent_stack_bb: float
    match_over: bool
    match_winner: Optional[Actor]

    def to_payload(self) -> dict:
        return {
            "hand_id": self.hand_id,
            "stage": self.stage.value if self.stage else None,
            "pot": self.pot,
            "board": [card.label for card in self.board],
            "player_stack": self.player_stack,
            "opponent_stack": self.opponent_stack,
            "player_bet": self.player_bet,
            "opponent_bet": self.opponent_bet,
            "button": self.button.value if self.button else None,
            "turn": self.turn.value if self.turn else None,
            "to_call": self.to_call,
            "suggested_raise": self.suggested_raise,
            "player_cards": [card.label for card in self.player_cards],
            "opponent_cards_visible": self.opponent_cards_visible,
            "opponent_cards": (
                [card.label for card in self.opponent_cards] if self.opponent_cards is not None else None
            ),
            "player_share": self.player_share,
            "opponent_share": self.opponent_share,
            "player_stack_bb": self.player_stack_bb,
            "opponent_stack_bb": self.opponent_stack_bb,
            "match_over": self.match_over,
            "match_winner": self.match_winner.value if self.match_winner else None,
        }


@dataclass
class ReportEntry:
    stage: Stage
    action: str
    chips_committed: int
    equity: float
    ev_advice: str
    disguise_advice: str

    def to_payload(self) -> dict:
        return {
            "stage": self.stage.value,
            "action": self.action,
            "chips_committed": self.chips_committed,
            "equity": round(self.equity, 4),
            "ev_advice": self.ev_advice,
            "disguise_advice": self.disguise_advice,
        }
