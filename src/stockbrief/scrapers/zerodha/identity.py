"""Browser identity rotation.

An identity is the pair of synthetic session/device tokens presented in the
request cookies. User agents and referers rotate on their own cursors, so a
rotated identity does not restart the user-agent or referer cycle.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass

from stockbrief.core.errors import ConfigError
from stockbrief.utils.logger import get_logger
from stockbrief.utils.metrics import identity_rotations

logger = get_logger(__name__)

BASE36_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"

USER_AGENTS: tuple[str, ...] = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:122.0) Gecko/20100101 Firefox/122.0",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.2 Safari/605.1.15",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Edge/121.0.0.0",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
)

REFERERS: tuple[str, ...] = (
    "https://www.google.com/",
    "https://www.google.com/search?q=zerodha+stock+market",
    "https://www.bing.com/",
    "https://www.bing.com/search?q=zerodha+stocks",
    "https://zerodha.com/",
    "https://zerodha.com/markets/",
    "https://zerodha.com/markets/stocks/",
    "https://www.yahoo.com/",
    "https://www.yahoo.com/finance/",
    "https://www.reddit.com/r/IndianStreetBets/",
    "https://www.moneycontrol.com/",
    "https://www.nseindia.com/",
    "https://www.bseindia.com/",
    "https://www.investing.com/",
    "https://www.tradingview.com/",
)


def random_token(rng: random.Random, length: int = 13) -> str:
    """Return a lowercase base-36 token of the given length."""
    return "".join(rng.choice(BASE36_ALPHABET) for _ in range(length))


@dataclass(frozen=True)
class Identity:
    """Synthetic session/device tokens presented as cookies."""

    session_id: str
    device_id: str

    @property
    def short(self) -> str:
        """Session prefix safe to put in logs."""
        return self.session_id[:16]


class IdentityRotator:
    """Owns the current identity and the user-agent/referer cursors.

    One rotator belongs to one `ZerodhaService`; concurrent fetches of that
    service share it, and a rotation by any attempt affects every request
    built afterwards.
    """

    def __init__(
        self,
        user_agents: Sequence[str] = USER_AGENTS,
        referers: Sequence[str] = REFERERS,
        rng: random.Random | None = None,
    ) -> None:
        if not user_agents:
            raise ConfigError("User agent catalogue is empty")
        if not referers:
            raise ConfigError("Referer catalogue is empty")

        self._user_agents = tuple(user_agents)
        self._referers = tuple(referers)
        self._rng = rng or random.Random()
        self._user_agent_cursor = 0
        self._referer_cursor = 0
        self.rotation_count = 0
        self._identity = self._mint()

    @property
    def user_agent_index(self) -> int:
        return self._user_agent_cursor

    @property
    def referer_index(self) -> int:
        return self._referer_cursor

    def _mint(self) -> Identity:
        return Identity(
            session_id="session_" + random_token(self._rng, 13) + random_token(self._rng, 13),
            device_id="device_" + random_token(self._rng, 13) + random_token(self._rng, 13),
        )

    def current(self) -> Identity:
        """Return the active identity."""
        return self._identity

    def rotate(self, reason: str = "manual") -> Identity:
        """Discard the active identity and mint a new one.

        Args:
            reason: Why the rotation happened (for logs/metrics)

        Returns:
            The new identity
        """
        previous = self._identity
        self._identity = self._mint()
        self.rotation_count += 1
        identity_rotations.labels(reason=reason).inc()
        logger.info(
            "Rotating session",
            reason=reason,
            previous_session=previous.short,
            session=self._identity.short,
        )
        return self._identity

    def next_user_agent(self) -> str:
        """Return the next user agent and advance its cursor."""
        user_agent = self._user_agents[self._user_agent_cursor % len(self._user_agents)]
        self._user_agent_cursor += 1
        return user_agent

    def next_referer(self) -> str:
        """Return the next referer and advance its cursor."""
        referer = self._referers[self._referer_cursor % len(self._referers)]
        self._referer_cursor += 1
        return referer
