"""Main entry point for `python -m stockbrief`.

Handles:
- Signal handling for graceful shutdown
- Production logging setup
"""

import signal
import sys
from typing import NoReturn

from stockbrief.cli import main as cli_main
from stockbrief.utils.logger import get_logger

logger = get_logger(__name__)


def signal_handler(signum: int, frame) -> None:
    """Handle shutdown signals gracefully.

    Args:
        signum: Signal number
        frame: Current stack frame
    """
    signal_name = signal.Signals(signum).name
    logger.info("Shutdown signal received", signal=signal_name)
    sys.exit(0)


def main() -> NoReturn:
    """Main entry point with signal handling."""
    signal.signal(signal.SIGTERM, signal_handler)

    sys.exit(cli_main())


if __name__ == "__main__":
    main()
