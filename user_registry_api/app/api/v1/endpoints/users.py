"""
User endpoints for API v1.

Provide listing, registration, authentication, breach lookup and
deletion of users.  ``UserEndpoint`` holds the request handling rules:
each handler takes already parsed input and returns an ``Outcome``
(status code plus body).  The thin FastAPI functions at the bottom of
the module parse requests, call the handlers and turn outcomes into
responses.  They are registered on the router from the ``ROUTES``
table.

Failure bodies are fixed plain text messages rather than structured
error objects; clients branch on the status code.
"""

import enum
import logging
from typing import Any, Callable, List, NamedTuple

from fastapi import APIRouter, Depends, Header, Request, Response, status
from fastapi.concurrency import run_in_threadpool
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, PlainTextResponse

from user_registry_api.app.schemas.user import User
from user_registry_api.app.services.breach_service import BreachCheckError
from user_registry_api.app.services.user_service import UserService


logger = logging.getLogger(__name__)

REGISTRATION_SUCCESSFUL = "Registration successful"


class UserFailure(enum.Enum):
    """Failure outcomes of the user endpoints with their status and message."""

    DUPLICATE_USER = (status.HTTP_400_BAD_REQUEST, "User already exists")
    BREACHED_PASSWORD = (
        status.HTTP_403_FORBIDDEN,
        "The password you typed has been leaked in a data breach and should not be used",
    )
    UNKNOWN_USER = (status.HTTP_400_BAD_REQUEST, "User not found")
    INVALID_CREDENTIALS = (status.HTTP_401_UNAUTHORIZED, "The password you typed is incorrect")
    REGISTRATION_FAILED = (
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Registration failed; contact site administrator",
    )

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message


class Outcome(NamedTuple):
    status_code: int
    body: Any = None

    @classmethod
    def ok(cls, body: Any = None) -> "Outcome":
        return cls(status.HTTP_200_OK, body)

    @classmethod
    def failure(cls, failure: UserFailure) -> "Outcome":
        return cls(failure.status_code, failure.message)


class UserEndpoint:
    """Maps user requests onto ``UserService`` calls."""

    def __init__(self, service: UserService) -> None:
        self.service = service

    def list(self) -> Outcome:
        """Return all registered users, or an empty list if none exists."""
        return Outcome.ok(self.service.get_all())

    def register(self, user: User, password_leak_checked: bool) -> Outcome:
        """Register ``user`` so it can authenticate later.

        Registration is refused if the username is taken (400) or, unless
        the caller already checked it, if the password has been leaked in
        a known breach (403).  Any failure to persist the user, or to
        reach the breach checker, is reported as 500.
        """
        if self.service.exists(user.username):
            return Outcome.failure(UserFailure.DUPLICATE_USER)
        if not password_leak_checked:
            try:
                leaked = self.service.password_leaked(user.password)
            except BreachCheckError:
                logger.error("Registration of %s aborted: breach check unavailable", user.username)
                return Outcome.failure(UserFailure.REGISTRATION_FAILED)
            if leaked:
                return Outcome.failure(UserFailure.BREACHED_PASSWORD)
        if self.service.add(user):
            return Outcome.ok(REGISTRATION_SUCCESSFUL)
        return Outcome.failure(UserFailure.REGISTRATION_FAILED)

    def authenticate(self, candidate: User) -> Outcome:
        """Return the stored user if the credentials match.

        An unknown username is 400, a wrong password for a known
        username is 401.
        """
        if not self.service.exists(candidate.username):
            return Outcome.failure(UserFailure.UNKNOWN_USER)
        user = self.service.get(candidate.username, candidate.password)
        if user is not None:
            return Outcome.ok(user)
        return Outcome.failure(UserFailure.INVALID_CREDENTIALS)

    def is_password_leaked(self, password: str) -> Outcome:
        return Outcome.ok(self.service.password_leaked(password))

    def delete(self, username: str) -> Outcome:
        # Deleting an unknown user is not an error.
        self.service.delete(username)
        return Outcome.ok()


def to_response(outcome: Outcome) -> Response:
    """Render an ``Outcome``: text bodies as text/plain, everything else as JSON."""
    if outcome.body is None:
        return Response(status_code=outcome.status_code)
    if isinstance(outcome.body, str):
        return PlainTextResponse(outcome.body, status_code=outcome.status_code)
    return JSONResponse(jsonable_encoder(outcome.body), status_code=outcome.status_code)


def get_user_endpoint(request: Request) -> UserEndpoint:
    """Dependency returning the endpoint wired up by ``create_app``."""
    return request.app.state.user_endpoint


def list_users(endpoint: UserEndpoint = Depends(get_user_endpoint)) -> Response:
    return to_response(endpoint.list())


def register_user(
    user: User,
    # Sent as the ``Password-Leak-Checked`` header.
    password_leak_checked: bool = Header(...),
    endpoint: UserEndpoint = Depends(get_user_endpoint),
) -> Response:
    return to_response(endpoint.register(user, password_leak_checked))


def authenticate_user(user: User, endpoint: UserEndpoint = Depends(get_user_endpoint)) -> Response:
    return to_response(endpoint.authenticate(user))


async def is_password_leaked(request: Request, endpoint: UserEndpoint = Depends(get_user_endpoint)) -> Response:
    # The body is the raw password, not JSON.  Undecodable bytes become
    # U+FFFD so the lookup still answers.
    password = (await request.body()).decode("utf-8", errors="replace")
    outcome = await run_in_threadpool(endpoint.is_password_leaked, password)
    return to_response(outcome)


def delete_user(username: str, endpoint: UserEndpoint = Depends(get_user_endpoint)) -> Response:
    return to_response(endpoint.delete(username))


class Route(NamedTuple):
    method: str
    path: str
    handler: Callable[..., Any]


# Paths are relative to the ``/users`` prefix applied in ``router.py``.
ROUTES: List[Route] = [
    Route("GET", "", list_users),
    Route("POST", "/register", register_user),
    Route("POST", "/authenticate", authenticate_user),
    Route("POST", "/is-pw-leaked", is_password_leaked),
    # Usernames may contain "/", so match the rest of the path.
    Route("DELETE", "/{username:path}", delete_user),
]

router = APIRouter()

for route in ROUTES:
    router.add_api_route(route.path, route.handler, methods=[route.method])
