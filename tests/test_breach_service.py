import hashlib

import pytest
import requests

from user_registry_api.app.services.breach_service import (
    BreachChecker,
    BreachCheckError,
    HIBPBreachChecker,
    StaticBreachChecker,
)


def sha1_parts(password):
    digest = hashlib.sha1(password.encode("utf-8")).hexdigest().upper()
    return digest[:5], digest[5:]


class FakeResponse:
    def __init__(self, text="", status_code=200):
        self.text = text
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)


class FakeSession:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def get(self, url, headers=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "timeout": timeout})
        if self.exc is not None:
            raise self.exc
        return self.response


def test_only_hash_prefix_is_sent():
    prefix, _ = sha1_parts("password")
    session = FakeSession(FakeResponse(""))
    checker = HIBPBreachChecker("https://example.test/range/", timeout=2, session=session)

    checker.is_leaked("password")

    call = session.calls[0]
    assert call["url"] == f"https://example.test/range/{prefix}"
    assert call["headers"]["Add-Padding"] == "true"
    assert call["timeout"] == 2
    assert "password" not in call["url"]


def test_matching_suffix_is_leaked():
    _, suffix = sha1_parts("password")
    body = "\r\n".join([
        "0018A45C4D1DEF81644B54AB7F969B88D65:1",
        f"{suffix}:3861493",
        "00D4F6E8FA6EECAD2A3AA415EEC418D38EC:2",
    ])
    checker = HIBPBreachChecker(session=FakeSession(FakeResponse(body)))

    assert checker.is_leaked("password") is True


def test_suffix_match_ignores_case():
    _, suffix = sha1_parts("password")
    checker = HIBPBreachChecker(session=FakeSession(FakeResponse(f"{suffix.lower()}:5")))

    assert checker.is_leaked("password") is True


def test_missing_suffix_is_not_leaked():
    checker = HIBPBreachChecker(
        session=FakeSession(FakeResponse("0018A45C4D1DEF81644B54AB7F969B88D65:1\n"))
    )

    assert checker.is_leaked("correct horse battery staple") is False


def test_padding_row_is_not_leaked():
    _, suffix = sha1_parts("tr0ub4dor&3")
    checker = HIBPBreachChecker(session=FakeSession(FakeResponse(f"{suffix}:0")))

    assert checker.is_leaked("tr0ub4dor&3") is False


def test_transport_error_raises_breach_check_error():
    checker = HIBPBreachChecker(session=FakeSession(exc=requests.ConnectionError("down")))

    with pytest.raises(BreachCheckError):
        checker.is_leaked("password")


def test_http_error_raises_breach_check_error():
    checker = HIBPBreachChecker(session=FakeSession(FakeResponse("busy", status_code=503)))

    with pytest.raises(BreachCheckError):
        checker.is_leaked("password")


def test_malformed_count_raises_breach_check_error():
    _, suffix = sha1_parts("password")
    checker = HIBPBreachChecker(session=FakeSession(FakeResponse(f"{suffix}:lots")))

    with pytest.raises(BreachCheckError):
        checker.is_leaked("password")


def test_static_checker():
    checker = StaticBreachChecker(["123456", "qwerty"])

    assert checker.is_leaked("qwerty")
    assert not checker.is_leaked("Qwerty")
    assert not StaticBreachChecker().is_leaked("123456")


def test_checkers_satisfy_breach_checker_protocol():
    assert isinstance(HIBPBreachChecker(session=FakeSession()), BreachChecker)
    assert isinstance(StaticBreachChecker(), BreachChecker)
    assert not isinstance(object(), BreachChecker)
