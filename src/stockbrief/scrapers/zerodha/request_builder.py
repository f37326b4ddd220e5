"""Dress a request up as a real browser visit.

Each call produces a complete header set (endpoint headers overlaid with
spoofed browser headers and a synthesized cookie) plus cache-busting query
parameters that differ on every call.
"""

from __future__ import annotations

import random
import time
from collections.abc import Mapping
from dataclasses import dataclass, field

from stockbrief.scrapers.zerodha.identity import Identity, random_token

CHROME_PROFILE = {
    "Sec-Ch-Ua": '"Not)A;Brand";v="8", "Chromium";v="121", "Google Chrome";v="121"',
    "Sec-Ch-Ua-Mobile": "?0",
    "Sec-Ch-Ua-Platform": '"Windows"',
}
FIREFOX_PROFILE = {
    "Sec-Ch-Ua": '"Not_A Brand";v="8", "Firefox";v="122"',
    "Sec-Ch-Ua-Mobile": "?0",
    "Sec-Ch-Ua-Platform": '"Windows"',
}
SAFARI_PROFILE = {
    "Sec-Ch-Ua": '"Not_A Brand";v="8", "Safari";v="17"',
    "Sec-Ch-Ua-Mobile": "?0",
    "Sec-Ch-Ua-Platform": '"macOS"',
}
EDGE_PROFILE = {
    "Sec-Ch-Ua": '"Not)A;Brand";v="8", "Chromium";v="121", "Microsoft Edge";v="121"',
    "Sec-Ch-Ua-Mobile": "?0",
    "Sec-Ch-Ua-Platform": '"Windows"',
}
CLIENT_HINT_HEADERS = ("Sec-Ch-Ua", "Sec-Ch-Ua-Mobile", "Sec-Ch-Ua-Platform")

BROWSER_HEADERS = {
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,"
        "image/apng,*/*;q=0.8,application/signed-exchange;v=b3;q=0.7"
    ),
    "Accept-Language": "en-US,en;q=0.9,en-GB;q=0.8",
    "Accept-Encoding": "gzip, deflate, br",
    "DNT": "1",
    "Connection": "keep-alive",
    "Upgrade-Insecure-Requests": "1",
    "Sec-Fetch-Dest": "document",
    "Sec-Fetch-Mode": "navigate",
    "Sec-Fetch-Site": "cross-site",
    "Sec-Fetch-User": "?1",
    "Cache-Control": "max-age=0",
    "Pragma": "no-cache",
}


@dataclass(frozen=True)
class PreparedRequest:
    """Everything needed to send one attempt, plus what it was dressed as."""

    url: str
    headers: dict[str, str]
    params: dict[str, str]
    identity: Identity
    user_agent: str
    referer: str
    cookies: dict[str, str] = field(default_factory=dict)


def browser_profile(user_agent: str) -> dict[str, str]:
    """Pick client-hint headers matching the browser family of a user agent.

    Chrome is checked first and Safari only matches when "Chrome" is absent,
    so Chromium agents that also carry a "Safari" token count as Chrome.
    Matching is case-sensitive. Unknown agents get an empty profile.
    """
    is_chrome = "Chrome" in user_agent
    is_firefox = "Firefox" in user_agent
    is_safari = "Safari" in user_agent and "Chrome" not in user_agent
    is_edge = "Edge" in user_agent

    if is_chrome:
        return dict(CHROME_PROFILE)
    if is_firefox:
        return dict(FIREFOX_PROFILE)
    if is_safari:
        return dict(SAFARI_PROFILE)
    if is_edge:
        return dict(EDGE_PROFILE)
    return {}


def build_cookie_header(cookies: Mapping[str, str]) -> str:
    """Serialize cookies as `k=v` pairs joined by `; `."""
    return "; ".join(f"{key}={value}" for key, value in cookies.items())


def cache_busting_params(
    rng: random.Random, now_ms: int, retry: bool = False
) -> dict[str, str]:
    """Query parameters that defeat intermediate caches."""
    params = {
        "_": str(now_ms),
        "v": random_token(rng, 6),
        "t": random_token(rng, 6),
    }
    if retry:
        params["retry"] = "1"
    params["cache"] = random_token(rng, 6)
    return params


def build_request(
    url: str,
    base_headers: Mapping[str, str],
    identity: Identity,
    user_agent: str,
    referer: str,
    *,
    retry: bool = False,
    rng: random.Random | None = None,
    now_ms: int | None = None,
) -> PreparedRequest:
    """Build headers and query parameters for one HTTP attempt.

    Args:
        url: Target URL
        base_headers: Endpoint-specific headers (overridden by browser headers)
        identity: Identity whose tokens go into the cookie
        user_agent: User agent to present
        referer: Referer to present
        retry: Mark the query as a retry
        rng: Random source (a fresh one when omitted)
        now_ms: Call time in epoch milliseconds (current time when omitted)

    Returns:
        PreparedRequest ready for the transport
    """
    rng = rng or random.Random()
    if now_ms is None:
        now_ms = int(time.time() * 1000)

    cookies = {
        "sessionid": identity.session_id,
        "device_id": identity.device_id,
        "csrftoken": random_token(rng, 13),
        "timestamp": str(now_ms),
    }

    headers = dict(base_headers)
    # Drop endpoint client hints so they cannot contradict the chosen agent
    for name in CLIENT_HINT_HEADERS:
        headers.pop(name, None)
    headers.update(BROWSER_HEADERS)
    headers.update(browser_profile(user_agent))
    headers["User-Agent"] = user_agent
    headers["Referer"] = referer
    headers["Cookie"] = build_cookie_header(cookies)

    return PreparedRequest(
        url=url,
        headers=headers,
        params=cache_busting_params(rng, now_ms, retry=retry),
        identity=identity,
        user_agent=user_agent,
        referer=referer,
        cookies=cookies,
    )
