"""Allow running Cadence as a module: python -m cadence."""

from __future__ import annotations

import argparse
import logging
import signal
import sys

from PyQt6.QtCore import QCoreApplication, QEventLoop, QTimer

from .settings import load_settings
from .timer.engine import Timer, TimerAction, TimerState

logger = logging.getLogger(__name__)


def _build_parser(settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cadence",
        description="Run an interval timer and print its lifecycle actions.",
    )
    parser.add_argument(
        "duration", type=float, nargs="?", default=settings.duration,
        help=f"run length in seconds (default: {settings.duration:g})",
    )
    parser.add_argument(
        "--repeat", action=argparse.BooleanOptionalAction, default=settings.repeats,
        help="re-arm after every completion (--no-repeat for a one-shot run)",
    )
    parser.add_argument(
        "--count", type=int, default=None, metavar="N",
        help="with --repeat, stop after N completions",
    )
    parser.add_argument(
        "--log-level", default=settings.log_level,
        help=f"logging level (default: {settings.log_level})",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    settings = load_settings()
    args = _build_parser(settings).parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])

    try:
        timer = Timer(args.duration, repeats=args.repeat, autostart=False)
    except (TypeError, ValueError) as exc:
        print(f"cadence: {exc}", file=sys.stderr)
        return 2

    loop = QEventLoop()
    completions = 0

    def on_action(action: TimerAction) -> None:
        nonlocal completions
        print(action, flush=True)
        if action.state is TimerState.COMPLETED:
            completions += 1
            if args.count is not None and completions >= args.count:
                timer.stop()
        elif action.state is TimerState.IDLE:
            loop.quit()

    timer.state_changed.connect(on_action)
    timer.finished.connect(loop.quit)

    # Let Python see Ctrl-C while the Qt loop is spinning
    previous_handler = signal.signal(signal.SIGINT, lambda *_: timer.stop())
    wakeup = QTimer()
    wakeup.timeout.connect(lambda: None)
    wakeup.start(200)

    logger.debug("running %s on %s", timer.duration, type(app).__name__)
    try:
        timer.start()
        if timer.is_running:
            loop.exec()
    finally:
        wakeup.stop()
        signal.signal(signal.SIGINT, previous_handler)
        timer.dispose()

    return 0


if __name__ == "__main__":
    sys.exit(main())
