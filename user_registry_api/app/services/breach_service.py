"""
Password breach checking.

``HIBPBreachChecker`` asks the Have I Been Pwned "Pwned Passwords"
range API whether a password has appeared in a known data breach.  The
API uses k-anonymity: only the first five hex characters of the
password's SHA-1 digest leave the process, and the service answers with
every known suffix for that prefix together with a breach count::

    0018A45C4D1DEF81644B54AB7F969B88D65:1
    00D4F6E8FA6EECAD2A3AA415EEC418D38EC:2

With the ``Add-Padding`` header the response also contains decoy rows
with a count of ``0``; those never count as a hit.

``StaticBreachChecker`` answers from a fixed set of passwords and is
meant for tests and offline instances.
"""

import hashlib
import logging
from typing import Iterable, Optional, Protocol, runtime_checkable

import requests


logger = logging.getLogger(__name__)


class BreachCheckError(Exception):
    """Raised when the breach corpus could not be consulted."""


@runtime_checkable
class BreachChecker(Protocol):
    """Anything that can tell whether a password appears in a breach corpus."""

    def is_leaked(self, password: str) -> bool:
        ...


class HIBPBreachChecker:
    """Breach checker backed by the Pwned Passwords range API."""

    user_agent = "user-registry-api"

    def __init__(
        self,
        api_url: str = "https://api.pwnedpasswords.com/range",
        timeout: float = 5.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def is_leaked(self, password: str) -> bool:
        digest = hashlib.sha1(password.encode("utf-8")).hexdigest().upper()
        prefix, suffix = digest[:5], digest[5:]
        try:
            resp = self.session.get(
                f"{self.api_url}/{prefix}",
                headers={"Add-Padding": "true", "User-Agent": self.user_agent},
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as exc:
            logger.error("Breach check for prefix %s failed: %s", prefix, exc)
            raise BreachCheckError(str(exc)) from exc
        for line in resp.text.splitlines():
            candidate, _, count = line.strip().partition(":")
            if candidate.upper() != suffix:
                continue
            try:
                return int(count) > 0
            except ValueError as exc:
                raise BreachCheckError(f"Malformed range response line: {line!r}") from exc
        return False


class StaticBreachChecker:
    """Breach checker that knows a fixed set of leaked passwords."""

    def __init__(self, leaked: Iterable[str] = ()) -> None:
        self.leaked = set(leaked)

    def is_leaked(self, password: str) -> bool:
        return password in self.leaked
