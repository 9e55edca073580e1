from __future__ import annotations


class EngineError(Exception):
    """Recoverable engine failure; ``code`` is what hosts send back to clients."""

    code = "ENGINE_ERROR"

    def __init__(self, msg: str) -> None:
        super().__init__(msg)
        self.msg = msg


class NotYourTurn(EngineError, RuntimeError):
    code = "OUT_OF_TURN"


class InvalidAction(EngineError, ValueError):
    code = "INVALID_ACTION"


class DeckExhausted(EngineError, ValueError):
    code = "DECK_EXHAUSTED"


class DegenerateEquityPool(EngineError, ValueError):
    code = "DEGENERATE_POOL"
