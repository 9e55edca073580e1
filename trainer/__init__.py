"""Trainer host package: serves the poker engine to a human over WebSocket."""

from .server import TrainerSession, run_server

__all__ = ["TrainerSession", "run_server"]
