import argparse
import asyncio
import logging

from core.models import TableConfig
from .server import run_server

logging.basicConfig(level=logging.INFO)


def main() -> None:
    # Stacks come from the scenario each client picks in its hello.
    parser = argparse.ArgumentParser(description="Heads-up poker trainer server")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8765)
    parser.add_argument("--big-blind", type=int, default=100)
    parser.add_argument(
        "--opponent-delay-ms",
        type=int,
        default=500,
        help="Pause before each opponent decision (milliseconds, 0 disables)",
    )
    parser.add_argument(
        "--equity-samples",
        type=int,
        default=150,
        help="Monte Carlo samples behind each opponent decision",
    )
    parser.add_argument(
        "--report-samples",
        type=int,
        default=100,
        help="Monte Carlo samples per graded decision in the hand report",
    )
    args = parser.parse_args()

    config = TableConfig(
        big_blind=args.big_blind,
        opponent_equity_samples=args.equity_samples,
        report_equity_samples=args.report_samples,
        opponent_delay_ms=args.opponent_delay_ms,
    )
    asyncio.run(run_server(args.host, args.port, config))


if __name__ == "__main__":
    main()
