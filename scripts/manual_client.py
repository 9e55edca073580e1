#!/usr/bin/env python3
"""Play a match against the trainer server from the terminal.

Example:
    python scripts/manual_client.py --scenario short --opponent aggressive_caller
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from typing import Any, Dict, List, Optional

import websockets

logging.basicConfig(level=logging.INFO)

SUIT_GLYPHS = {"s": "♠", "h": "♥", "d": "♦", "c": "♣"}
ACTION_KEYS = {"F": "FOLD", "C": "CHECK_OR_CALL", "A": "ALL_IN", "R": "RAISE"}


def show_cards(labels: Optional[List[str]]) -> str:
    if not labels:
        return "--"
    return " ".join(f"{label[0]}{SUIT_GLYPHS.get(label[1], label[1])}" for label in labels)


class ManualClient:
    def __init__(self, url: str, scenario: str, opponent: str) -> None:
        self.url = url
        self.scenario = scenario
        self.opponent = opponent
        self.websocket: Any = None

    async def run(self) -> None:
        async with websockets.connect(self.url) as ws:
            self.websocket = ws
            await self._send({"type": "hello", "scenario": self.scenario, "opponent": self.opponent})
            await self._loop()

    async def _loop(self) -> None:
        while True:
            msg = json.loads(await self.websocket.recv())
            msg_type = msg.get("type")
            if msg_type == "welcome":
                print(msg.get("blurb", ""))
            elif msg_type == "error":
                print(f"! {msg.get('code')}: {msg.get('msg')}")
                if msg.get("code", "").startswith("BAD_"):
                    break
            elif msg_type == "start_hand":
                print(f"\n=== Hand {msg['hand_id']} (button: {msg['button']}) ===")
            elif msg_type == "event":
                self._print_event(msg)
            elif msg_type == "thinking":
                print("Opponent thinking...")
            elif msg_type == "act":
                self._print_view(msg)
                await self._send(self._prompt_action(msg))
            elif msg_type == "end_hand":
                self._print_report(msg)
                await asyncio.get_running_loop().run_in_executor(None, input, "Press Enter for the next hand")
                await self._send({"type": "next_hand"})
            elif msg_type == "match_end":
                winner = msg.get("winner")
                print("Victory!" if winner == "PLAYER" else "Defeat", msg.get("final_stacks"))
                break

    def _print_view(self, view: Dict[str, Any]) -> None:
        print(
            f"[{view['stage']}] pot {view['pot']} | board {show_cards(view['board'])} | "
            f"you {show_cards(view['player_cards'])} {view['player_stack']} "
            f"({view['player_stack_bb']:.1f} BB) | opponent {view['opponent_stack']} "
            f"({view['opponent_stack_bb']:.1f} BB) | to call {view['to_call']}"
        )

    def _print_event(self, event: Dict[str, Any]) -> None:
        if event.get("action") == "SHOWDOWN":
            print(f"Showdown on {show_cards(event['board'])}: {event['result']} takes {event['chips']}")
            return
        print(f"{event['actor']} {event['action']} {event['chips'] or ''}".rstrip())

    def _print_report(self, msg: Dict[str, Any]) -> None:
        view = msg["view"]
        if view.get("opponent_cards_visible"):
            print(f"Opponent held {show_cards(view['opponent_cards'])}")
        for entry in msg.get("report", []):
            print(
                f"{entry['stage']}: {entry['action']} for {entry['chips_committed']} chips | "
                f"equity {entry['equity'] * 100:.1f}%\n  Advice: {entry['ev_advice']}\n"
                f"  Disguise: {entry['disguise_advice']}"
            )

    def _prompt_action(self, view: Dict[str, Any]) -> Dict[str, Any]:
        while True:
            choice = input("Action [F]old/[C]heck-call/[A]ll-in/[R]aise: ").strip().upper()
            action = ACTION_KEYS.get(choice[:1]) if choice else "CHECK_OR_CALL"
            if action is None:
                print("Illegal selection. Try again.")
                continue
            payload: Dict[str, Any] = {"type": "action", "action": action}
            if action == "RAISE":
                raw = input(f"Raise by (default {view['suggested_raise']}): ").strip()
                try:
                    payload["amount"] = int(raw) if raw else view["suggested_raise"]
                except ValueError:
                    print("Amount must be a whole number.")
                    continue
            return payload

    async def _send(self, payload: Dict[str, Any]) -> None:
        await self.websocket.send(json.dumps(payload))


def main() -> None:
    parser = argparse.ArgumentParser(description="Terminal client for the heads-up trainer")
    parser.add_argument("--url", default="ws://127.0.0.1:8765")
    parser.add_argument("--scenario", default="equal", choices=["equal", "short", "big"])
    parser.add_argument("--opponent", default="value_hunter")
    args = parser.parse_args()
    try:
        asyncio.run(ManualClient(args.url, args.scenario, args.opponent).run())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
