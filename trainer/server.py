from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, Awaitable, Callable, Dict, Optional

from websockets.asyncio.server import serve
from websockets.exceptions import ConnectionClosed

from core.errors import EngineError
from core.game import GameEngine
from core.models import Actor, Archetype, StackScenario, TableConfig

LOGGER = logging.getLogger("trainer_host")

ThinkDelay = Callable[[], Awaitable[None]]


class TrainerServerError(Exception):
    def __init__(self, code: str, msg: str) -> None:
        super().__init__(msg)
        self.code = code
        self.msg = msg


def _config_payload(config: TableConfig) -> Dict[str, Any]:
    return {
        "big_blind": config.big_blind,
        "small_blind": config.small_blind,
        "player_stack": config.player_stack,
        "opponent_stack": config.opponent_stack,
    }


async def _send_error(websocket: Any, code: str, msg: str) -> None:
    await websocket.send(json.dumps({"type": "error", "code": code, "msg": msg}))


def delay_for(ms: int) -> ThinkDelay:
    async def _think() -> None:
        if ms > 0:
            await asyncio.sleep(ms / 1000)

    return _think


@dataclass
class HumanClient:
    websocket: Any

    async def send_json(self, payload: Dict[str, Any]) -> None:
        await self.websocket.send(json.dumps({"v": 1, **payload}))

    async def recv_json(self) -> Dict[str, Any]:
        raw = await self.websocket.recv()
        try:
            message = json.loads(raw)
        except ValueError:
            return {}
        return message if isinstance(message, dict) else {}


# Each connection runs exactly one match through a TrainerSession.


class TrainerSession:
    """Plays one match between a connected human and the house archetype."""

    def __init__(
        self,
        engine: GameEngine,
        client: HumanClient,
        think: Optional[ThinkDelay] = None,
        max_hands: Optional[int] = None,
        auto_continue: bool = False,
    ) -> None:
        self.engine = engine
        self.client = client
        # The only suspension point between turns; tests pass a no-op.
        self.think = think or delay_for(engine.config.opponent_delay_ms)
        self.max_hands = max_hands
        self.auto_continue = auto_continue
        self._events_sent = 0

    async def run(self) -> None:
        # One match = repeated hands until a stack is empty (or the hand cap).
        while self.engine.can_start_hand():
            if self.max_hands is not None and self.engine.match.hands_played >= self.max_hands:
                break
            ctx = self.engine.start_hand()
            self._events_sent = 0
            await self.client.send_json({"type": "start_hand", "hand_id": ctx.hand_id, "button": ctx.button.value})
            await self._play_hand()
            await self._finish_hand()
            if self.engine.is_match_over():
                break
            if not self.auto_continue:
                await self._wait_for_next_hand()

        result = self.engine.match_result()
        LOGGER.info("Match finished: %s", result)
        await self.client.send_json({"type": "match_end", **result})

    async def _play_hand(self) -> None:
        while not self.engine.is_hand_complete():
            await self._send_state()
            hand = self.engine.hand
            assert hand is not None
            if hand.turn is Actor.PLAYER:
                await self._prompt_player()
            else:
                await self.client.send_json({"type": "thinking"})
                await self.think()
                self.engine.play_opponent_turn()
            await self._publish_events()

    async def _prompt_player(self) -> None:
        while True:
            view = self.engine.public_view()
            await self.client.send_json(
                {
                    "type": "act",
                    "legal": ["FOLD", "CHECK_OR_CALL", "ALL_IN", "RAISE"],
                    **view.to_payload(),
                }
            )
            message = await self.client.recv_json()
            if message.get("type") != "action":
                continue
            action = message.get("action")
            amount = message.get("amount")
            try:
                self.engine.submit_action(Actor.PLAYER, action, amount)
            except EngineError as exc:
                LOGGER.warning("Rejected action action=%s amount=%s reason=%s", action, amount, exc)
                await _send_error(self.client.websocket, exc.code, exc.msg)
                continue
            LOGGER.debug("Applied player action=%s amount=%s", action, amount)
            return

    async def _publish_events(self) -> None:
        hand = self.engine.hand
        assert hand is not None
        for record in hand.action_log[self._events_sent:]:
            await self.client.send_json({"type": "event", **record.to_payload()})
        self._events_sent = len(hand.action_log)

    async def _send_state(self) -> None:
        await self.client.send_json({"type": "state", **self.engine.public_view().to_payload()})

    async def _finish_hand(self) -> None:
        hand = self.engine.hand
        assert hand is not None
        report = [entry.to_payload() for entry in self.engine.hand_report()]
        await self.client.send_json(
            {
                "type": "end_hand",
                "hand_id": hand.hand_id,
                "winner": hand.winner,
                "hands": self.engine.showdown_hands(),
                "view": self.engine.public_view().to_payload(),
                "report": report,
            }
        )
        LOGGER.info(
            "Hand %s finished; winner=%s stacks=%s/%s",
            hand.hand_id,
            hand.winner,
            self.engine.match.player.stack,
            self.engine.match.opponent.stack,
        )

    async def _wait_for_next_hand(self) -> None:
        while True:
            message = await self.client.recv_json()
            if message.get("type") == "next_hand":
                return


def _parse_hello(hello: Dict[str, Any]) -> tuple[StackScenario, Archetype]:
    if hello.get("type") != "hello":
        raise TrainerServerError("BAD_HELLO", "Expected hello")
    try:
        scenario = StackScenario(hello.get("scenario") or StackScenario.EQUAL.value)
    except ValueError:
        raise TrainerServerError("BAD_SCENARIO", "scenario must be equal, short or big") from None
    try:
        archetype = Archetype(hello.get("opponent") or Archetype.VALUE_HUNTER.value)
    except ValueError:
        choices = ", ".join(item.value for item in Archetype)
        raise TrainerServerError("BAD_OPPONENT", f"opponent must be one of {choices}") from None
    return scenario, archetype


async def handle_connection(websocket: Any, base_config: TableConfig, auto_continue: bool = False) -> None:
    client = HumanClient(websocket)
    try:
        scenario, archetype = _parse_hello(await client.recv_json())
    except TrainerServerError as exc:
        await _send_error(websocket, exc.code, exc.msg)
        return

    config = TableConfig.for_scenario(
        scenario,
        big_blind=base_config.big_blind,
        opponent_equity_samples=base_config.opponent_equity_samples,
        report_equity_samples=base_config.report_equity_samples,
        opponent_delay_ms=base_config.opponent_delay_ms,
    )
    engine = GameEngine(config, archetype)
    await client.send_json(
        {
            "type": "welcome",
            "scenario": scenario.value,
            "opponent": archetype.value,
            "blurb": archetype.blurb,
            "config": _config_payload(config),
        }
    )
    LOGGER.info("Match started: scenario=%s opponent=%s", scenario.value, archetype.value)

    session = TrainerSession(engine, client, auto_continue=auto_continue)
    try:
        await session.run()
    except ConnectionClosed:
        LOGGER.info("Client disconnected mid-match")
    except Exception as exc:  # noqa: BLE001
        LOGGER.exception("Trainer session crashed: %s", exc)


def _process_request(connection, request):
    """Return a simple HTTP response for health checks."""

    if request.headers.get("Upgrade", "").lower() == "websocket":
        return None  # let the WebSocket handshake continue

    if request.path in {"/", "/health", "/healthz"}:
        return connection.respond(HTTPStatus.OK, "trainer server running\n")
    return connection.respond(HTTPStatus.NOT_FOUND, "not found\n")


async def run_server(host: str, port: int, config: TableConfig) -> None:
    async def _handler(ws):
        await handle_connection(ws, config)

    async with serve(_handler, host, port, process_request=_process_request):
        LOGGER.info("Trainer server listening on %s:%s", host, port)
        await asyncio.Future()
