"""Tests for the encrypted session cookie."""

import time

import pytest
from starlette.responses import Response

from libs.auth_session.cookies import CookieConfig, CookieManager

PASSWORD = "the-password-must-be-at-least-32-characters-long"
OLD_PASSWORD = "an-older-password-that-is-also-32-characters"


@pytest.fixture()
def cookie_manager() -> CookieManager:
    return CookieManager(CookieConfig(max_age=14400, secure=True), [PASSWORD])


def test_round_trip(cookie_manager):
    value = cookie_manager.encode("sid1")

    assert "sid1" not in value
    assert cookie_manager.read({"session": value}) == "sid1"


def test_set_cookie_attributes(cookie_manager):
    response = Response()
    cookie_manager.set(response, "sid1")

    header = response.headers["set-cookie"]
    assert header.startswith("session=")
    assert "HttpOnly" in header
    assert "Secure" in header
    assert "SameSite=lax" in header
    assert "Path=/" in header
    assert "Max-Age=14400" in header


def test_insecure_cookie_for_development():
    manager = CookieManager(CookieConfig(max_age=60, secure=False), [PASSWORD])
    response = Response()
    manager.set(response, "sid1")

    assert "Secure" not in response.headers["set-cookie"]


def test_clear_expires_cookie(cookie_manager):
    response = Response()
    cookie_manager.clear(response)

    header = response.headers["set-cookie"]
    assert header.startswith('session=""') or header.startswith("session=;")
    assert "Max-Age=0" in header


def test_tampered_cookie_is_rejected(cookie_manager):
    value = cookie_manager.encode("sid1")
    middle = len(value) // 2
    tampered = value[:middle] + ("A" if value[middle] != "A" else "B") + value[middle + 1 :]

    assert cookie_manager.read({"session": tampered}) is None
    assert cookie_manager.decode("garbage") is None


def test_absent_cookie(cookie_manager):
    assert cookie_manager.read({}) is None
    assert cookie_manager.read({"session": ""}) is None


def test_cookie_older_than_session_ttl_is_rejected(cookie_manager):
    stale = cookie_manager.fernet.encrypt_at_time(b"sid1", int(time.time()) - 20000)

    assert cookie_manager.decode(stale.decode("ascii")) is None


def test_rotation_accepts_previous_password():
    old = CookieManager(CookieConfig(max_age=60, secure=True), [OLD_PASSWORD])
    rotated = CookieManager(CookieConfig(max_age=60, secure=True), [PASSWORD, OLD_PASSWORD])

    assert rotated.decode(old.encode("sid1")) == "sid1"


@pytest.mark.parametrize("passwords", [[], ["short"]])
def test_invalid_passwords_are_refused(passwords):
    with pytest.raises(ValueError):
        CookieManager(CookieConfig(max_age=60, secure=True), passwords)
