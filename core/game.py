from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from .cards import Card, Deck, new_shuffled_deck
from .errors import InvalidAction, NotYourTurn
from .evaluator import compare, describe_rank, evaluate_best
from .models import (
    ActionKind,
    ActionRecord,
    Actor,
    Archetype,
    PlayerSeat,
    PublicView,
    ReportEntry,
    Stage,
    StackScenario,
    TableConfig,
)
from .opponents import Decision, Situation, decide
from .report import build_report

# GameEngine keeps all match state in memory. No networking lives here, only
# poker rules, chip accounting and turn order.

LOGGER = logging.getLogger(__name__)

# Street -> (next street, cards dealt after the burn).
_NEXT_STREET = {
    Stage.PRE_FLOP: (Stage.FLOP, 3),
    Stage.FLOP: (Stage.TURN, 1),
    Stage.TURN: (Stage.RIVER, 1),
}


@dataclass
class HandContext:
    # All mutable info about the current hand.
    hand_id: str
    button: Actor
    deck: Deck
    starting_total: int
    board: List[Card] = field(default_factory=list)
    stage: Stage = Stage.PRE_FLOP
    pot: int = 0
    turn: Optional[Actor] = None
    winner: Optional[str] = None
    action_log: List[ActionRecord] = field(default_factory=list)


@dataclass
class MatchState:
    config: TableConfig
    archetype: Archetype
    player: PlayerSeat
    opponent: PlayerSeat
    button: Optional[Actor] = None
    hands_played: int = 0


class GameEngine:
    """Heads-up No-Limit Texas Hold'em: one human seat against one archetype."""

    def __init__(
        self,
        config: TableConfig,
        archetype: Archetype = Archetype.VALUE_HUNTER,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config
        self.rng = rng or random.Random()
        self.match = MatchState(
            config=config,
            archetype=Archetype(archetype),
            player=PlayerSeat(actor=Actor.PLAYER, stack=config.player_stack),
            opponent=PlayerSeat(actor=Actor.OPPONENT, stack=config.opponent_stack),
        )
        self.hand: Optional[HandContext] = None

    @classmethod
    def start_match(
        cls,
        scenario: Union[StackScenario, str],
        archetype: Union[Archetype, str],
        *,
        big_blind: int = 100,
        rng: Optional[random.Random] = None,
        **config_overrides: int,
    ) -> "GameEngine":
        config = TableConfig.for_scenario(StackScenario(scenario), big_blind=big_blind, **config_overrides)
        return cls(config, Archetype(archetype), rng=rng)

    def seat(self, actor: Actor) -> PlayerSeat:
        return self.match.player if actor is Actor.PLAYER else self.match.opponent

    def total_chips(self) -> int:
        pot = self.hand.pot if self.hand else 0
        return pot + self.match.player.stack + self.match.opponent.stack

    # Hand lifecycle --------------------------------------------------
    def can_start_hand(self) -> bool:
        return self.match.player.stack > 0 and self.match.opponent.stack > 0

    def start_hand(self) -> HandContext:
        if not self.can_start_hand():
            raise RuntimeError("Match is over; no hand can be started")
        if self.hand and self.hand.stage is not Stage.SHOWDOWN:
            raise RuntimeError("Hand already in progress")

        for seat in (self.match.player, self.match.opponent):
            seat.reset_for_hand()

        # First hand puts the player on the button, then it alternates.
        if self.match.button is None:
            self.match.button = Actor.PLAYER
        else:
            self.match.button = self.match.button.other()

        hand_id = f"H-{time.strftime('%Y%m%d')}-{self.match.hands_played:05d}"
        self.match.hands_played += 1

        ctx = HandContext(
            hand_id=hand_id,
            button=self.match.button,
            deck=new_shuffled_deck(self.rng),
            starting_total=self.total_chips(),
        )
        self.hand = ctx

        self.match.player.hole_cards.extend(ctx.deck.deal_many(2))
        self.match.opponent.hole_cards.extend(ctx.deck.deal_many(2))
        self._post_blinds(ctx)
        # The big blind acts first preflop; an all-in big blind has nothing to decide.
        ctx.turn = ctx.button.other()
        if self.seat(ctx.turn).stack == 0:
            ctx.turn = ctx.button
        # A short all-in blind can leave nothing to bet.
        self._return_uncalled(ctx)
        if self.match.player.current_bet == self.match.opponent.current_bet:
            self._close_street(ctx)
        return ctx

    def _post_blinds(self, ctx: HandContext) -> None:
        sb_seat = self.seat(ctx.button)
        bb_seat = self.seat(ctx.button.other())
        self._commit_chips(sb_seat, self.config.small_blind, ctx)
        self._commit_chips(bb_seat, self.config.big_blind, ctx)

    def _commit_chips(self, seat: PlayerSeat, amount: int, ctx: HandContext) -> int:
        amount = max(0, min(amount, seat.stack))
        seat.stack -= amount
        seat.current_bet += amount
        ctx.pot += amount
        return amount

    # Action handling -------------------------------------------------
    def to_call(self, actor: Actor) -> int:
        seat = self.seat(actor)
        other = self.seat(actor.other())
        return max(other.current_bet - seat.current_bet, 0)

    def submit_action(
        self,
        actor: Union[Actor, str],
        action: Union[ActionKind, str],
        raise_amount: Optional[int] = None,
    ) -> HandContext:
        ctx = self.hand
        try:
            actor = Actor(actor)
        except ValueError:
            raise InvalidAction(f"Unknown actor {actor!r}") from None
        if ctx is None or ctx.stage is Stage.SHOWDOWN:
            raise NotYourTurn("No betting round in progress")
        if actor is not ctx.turn:
            raise NotYourTurn(f"It is {ctx.turn.value if ctx.turn else 'nobody'}'s turn")

        try:
            kind = ActionKind(action)
        except ValueError:
            raise InvalidAction(f"Unsupported action {action!r}") from None
        if kind is ActionKind.RAISE:
            if isinstance(raise_amount, bool) or not isinstance(raise_amount, int):
                raise InvalidAction("Raise requires an integer amount")
            if raise_amount < 0:
                raise InvalidAction("Raise amount cannot be negative")

        seat = self.seat(actor)
        owed = self.to_call(actor)
        record = ActionRecord(
            stage=ctx.stage,
            actor=actor,
            action=kind.value,
            chips=0,
            to_call=owed,
            pot=ctx.pot,
            board=list(ctx.board),
            hole_cards=list(seat.hole_cards),
        )

        # Each branch records what happened so the report can grade it later.
        if kind is ActionKind.FOLD:
            seat.folded = True
            ctx.action_log.append(record)
            self._resolve_showdown(ctx)
            return ctx

        if kind is ActionKind.CHECK_OR_CALL:
            if owed > 0:
                record.action = "CALL"
                record.chips = self._commit_chips(seat, owed, ctx)
            else:
                record.action = "CHECK"
        elif kind is ActionKind.ALL_IN:
            record.chips = self._commit_chips(seat, seat.stack, ctx)
        else:
            assert raise_amount is not None
            record.chips = self._commit_chips(seat, owed + raise_amount, ctx)

        ctx.action_log.append(record)
        self._after_bet(ctx)
        return ctx

    def _after_bet(self, ctx: HandContext) -> None:
        player, opponent = self.match.player, self.match.opponent
        self._return_uncalled(ctx)
        if player.current_bet != opponent.current_bet:
            assert ctx.turn is not None
            ctx.turn = ctx.turn.other()
            return
        self._close_street(ctx)

    def _close_street(self, ctx: HandContext) -> None:
        player, opponent = self.match.player, self.match.opponent
        player.reset_for_round()
        opponent.reset_for_round()
        if player.stack == 0 or opponent.stack == 0:
            # Nobody can bet any more: run the board out.
            while ctx.stage is not Stage.SHOWDOWN:
                self._advance_stage(ctx)
            return
        self._advance_stage(ctx)

    def _return_uncalled(self, ctx: HandContext) -> None:
        player, opponent = self.match.player, self.match.opponent
        if player.current_bet == opponent.current_bet:
            return
        high, low = (player, opponent) if player.current_bet > opponent.current_bet else (opponent, player)
        if low.stack > 0:
            return
        excess = high.current_bet - low.current_bet
        high.current_bet -= excess
        high.stack += excess
        ctx.pot -= excess

    def _advance_stage(self, ctx: HandContext) -> None:
        if ctx.stage is Stage.RIVER:
            self._resolve_showdown(ctx)
            return
        next_stage, count = _NEXT_STREET[ctx.stage]
        ctx.deck.burn()
        ctx.board.extend(ctx.deck.deal_many(count))
        ctx.stage = next_stage
        ctx.turn = ctx.button.other()

    def _resolve_showdown(self, ctx: HandContext) -> None:
        player, opponent = self.match.player, self.match.opponent
        pot = ctx.pot
        ctx.stage = Stage.SHOWDOWN
        ctx.turn = None

        if player.folded or opponent.folded:
            winner = opponent if player.folded else player
            winner.stack += pot
            ctx.winner = winner.actor.value
        else:
            outcome = compare(player.hole_cards, opponent.hole_cards, ctx.board)
            if outcome > 0:
                player.stack += pot
                ctx.winner = Actor.PLAYER.value
            elif outcome < 0:
                opponent.stack += pot
                ctx.winner = Actor.OPPONENT.value
            else:
                share, remainder = divmod(pot, 2)
                player.stack += share
                opponent.stack += share
                # Odd chip goes to the player out of position.
                self.seat(ctx.button.other()).stack += remainder
                ctx.winner = "SPLIT"
        ctx.pot = 0
        for seat in (player, opponent):
            seat.reset_for_round()

        ctx.action_log.append(
            ActionRecord(
                stage=Stage.SHOWDOWN,
                actor=None,
                action="SHOWDOWN",
                chips=pot,
                to_call=0,
                pot=pot,
                board=list(ctx.board),
                hole_cards=[],
                result=ctx.winner,
            )
        )
        assert self.total_chips() == ctx.starting_total, "chip conservation violated"
        LOGGER.debug(
            "Hand %s finished: winner=%s pot=%s stacks=%s/%s",
            ctx.hand_id,
            ctx.winner,
            pot,
            player.stack,
            opponent.stack,
        )

    # Opponent ----------------------------------------------------------
    def opponent_decision(self) -> Decision:
        ctx = self.hand
        if ctx is None or ctx.turn is not Actor.OPPONENT:
            raise NotYourTurn("Opponent is not to act")
        opponent = self.match.opponent
        situation = Situation(
            stage=ctx.stage,
            hole_cards=list(opponent.hole_cards),
            board=list(ctx.board),
            to_call=self.to_call(Actor.OPPONENT),
            pot=ctx.pot,
            stack=opponent.stack,
            hero_stack=self.match.player.stack,
            big_blind=self.config.big_blind,
        )
        return decide(
            self.match.archetype,
            situation,
            rng=self.rng,
            equity_samples=self.config.opponent_equity_samples,
        )

    def play_opponent_turn(self) -> HandContext:
        decision = self.opponent_decision()
        return self.submit_action(Actor.OPPONENT, decision.action, decision.amount)

    # Public/Snapshot helpers -----------------------------------------
    def opponent_cards_visible(self) -> bool:
        ctx = self.hand
        if ctx is None:
            return False
        return ctx.stage is Stage.SHOWDOWN or self.match.player.folded or self.match.opponent.folded

    def public_view(self) -> PublicView:
        ctx = self.hand
        player, opponent = self.match.player, self.match.opponent
        visible = self.opponent_cards_visible()
        chips_in_play = player.stack + opponent.stack
        owed = self.to_call(Actor.PLAYER) if ctx and ctx.stage is not Stage.SHOWDOWN else 0
        big_blind = self.config.big_blind
        return PublicView(
            hand_id=ctx.hand_id if ctx else None,
            stage=ctx.stage if ctx else None,
            pot=ctx.pot if ctx else 0,
            board=list(ctx.board) if ctx else [],
            player_stack=player.stack,
            opponent_stack=opponent.stack,
            player_bet=player.current_bet,
            opponent_bet=opponent.current_bet,
            button=self.match.button,
            turn=ctx.turn if ctx else None,
            to_call=owed,
            suggested_raise=min(big_blind, max(player.stack - owed, 0)),
            player_cards=list(player.hole_cards),
            opponent_cards_visible=visible,
            opponent_cards=list(opponent.hole_cards) if visible else None,
            player_share=player.stack / chips_in_play if chips_in_play else 0.0,
            opponent_share=opponent.stack / chips_in_play if chips_in_play else 0.0,
            player_stack_bb=player.stack / big_blind,
            opponent_stack_bb=opponent.stack / big_blind,
            match_over=self.is_match_over(),
            match_winner=self.match_winner(),
        )

    def showdown_hands(self) -> Dict[str, str]:
        """Made-hand names at showdown, for hosts that announce them."""
        ctx = self.hand
        if ctx is None or ctx.stage is not Stage.SHOWDOWN or len(ctx.board) < 5:
            return {}
        if self.match.player.folded or self.match.opponent.folded:
            return {}
        return {
            seat.actor.value: describe_rank(evaluate_best(seat.hole_cards + ctx.board))
            for seat in (self.match.player, self.match.opponent)
        }

    def hand_report(self) -> List[ReportEntry]:
        if self.hand is None:
            return []
        return build_report(self.hand.action_log, samples=self.config.report_equity_samples, rng=self.rng)

    def is_hand_complete(self) -> bool:
        return bool(self.hand and self.hand.stage is Stage.SHOWDOWN)

    def is_match_over(self) -> bool:
        if self.hand and self.hand.stage is not Stage.SHOWDOWN:
            return False
        return not self.can_start_hand()

    def match_winner(self) -> Optional[Actor]:
        if not self.is_match_over():
            return None
        return Actor.PLAYER if self.match.player.stack > 0 else Actor.OPPONENT

    def match_result(self) -> Dict[str, object]:
        winner = self.match_winner()
        return {
            "winner": winner.value if winner else None,
            "hands_played": self.match.hands_played,
            "final_stacks": {
                Actor.PLAYER.value: self.match.player.stack,
                Actor.OPPONENT.value: self.match.opponent.stack,
            },
        }
