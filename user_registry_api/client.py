"""User registry API client.

A thin wrapper around the ``/users`` HTTP surface, for scripts and
other services that register or authenticate users remotely.  The
client uses the ``requests`` library internally.

Every method returns a tuple ``(data, error)``.  On success ``data``
holds the decoded response (JSON for lists, users and booleans, text
for the registration message) and ``error`` is ``None``.  On failure
``data`` is ``None`` and ``error`` is a dictionary with the keys
``status_code`` and ``message``; ``message`` carries the server's
fixed text, e.g. ``"User already exists"``.  Transport problems are
reported the same way with ``status_code`` set to ``None``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import requests


logger = logging.getLogger(__name__)


class UsersClient:
    """Client for the user registry API."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialise the client.

        Args:
            base_url: Root URL of the service, including any mount
                prefix, e.g. ``http://localhost:8000``.
            timeout: Seconds to wait for each response.
            session: Optional :class:`requests.Session` to reuse.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _request(
        self, method: str, path: str, *, json_body: Any | None = None,
        data: str | None = None, headers: Dict[str, str] | None = None
    ) -> Tuple[Optional[Any], Optional[Dict[str, Any]]]:
        """Perform an HTTP request to the API.

        Args:
            method: HTTP method (``GET``, ``POST``, ``DELETE``).
            path: Path relative to :attr:`base_url` (e.g. ``/users/register``).
            json_body: JSON body to send with the request.
            data: Raw text body, sent instead of ``json_body``.
            headers: Extra request headers.
        Returns:
            A tuple ``(data, error)`` as described in the module docstring.
        """
        url = f"{self.base_url}{path}"
        body = data.encode("utf-8") if data is not None else None
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                json=json_body,
                data=body,
                headers=headers or {},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = exc.response.text if exc.response is not None else ""
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}
        if not response.content:
            return None, None
        if "json" in response.headers.get("Content-Type", ""):
            return response.json(), None
        return response.text, None

    def list_users(self) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        """Return all registered users."""
        data, error = self._request("GET", "/users")
        return data or [], error

    def register(
        self, username: str, password: str, password_leak_checked: bool = False
    ) -> Tuple[Optional[str], Optional[Dict[str, Any]]]:
        """Register a new user.

        Pass ``password_leak_checked=True`` if the password was already
        checked with :meth:`is_password_leaked`; the server then skips
        its own breach lookup.
        """
        return self._request(
            "POST",
            "/users/register",
            json_body={"username": username, "password": password},
            headers={"Password-Leak-Checked": "true" if password_leak_checked else "false"},
        )

    def authenticate(self, username: str, password: str) -> Tuple[Optional[Dict[str, Any]], Optional[Dict[str, Any]]]:
        """Return the stored user record if the credentials are valid."""
        return self._request(
            "POST",
            "/users/authenticate",
            json_body={"username": username, "password": password},
        )

    def is_password_leaked(self, password: str) -> Tuple[Optional[bool], Optional[Dict[str, Any]]]:
        return self._request(
            "POST",
            "/users/is-pw-leaked",
            data=password,
            headers={"Content-Type": "text/plain; charset=utf-8"},
        )

    def delete_user(self, username: str) -> Tuple[bool, Optional[Dict[str, Any]]]:
        """Delete a user.  Succeeds whether or not the user existed."""
        _, error = self._request("DELETE", f"/users/{quote(username, safe='')}")
        return error is None, error
