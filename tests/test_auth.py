from urllib.parse import parse_qsl

import pytest
import requests
from oauthlib.oauth2 import InvalidClientError
from requests_oauthlib import OAuth2Session

from gallerysync.auth import AuthManager
from gallerysync.errors import AuthError


def test_authenticate_returns_access_token(monkeypatch, config_factory):
    seen = {}

    def fake_fetch_token(self, token_url=None, **kwargs):
        seen["token_url"] = token_url
        seen.update(kwargs)
        return {"access_token": "abc", "token_type": "Bearer", "expires_in": 3599}

    monkeypatch.setattr(OAuth2Session, "fetch_token", fake_fetch_token)

    am = AuthManager(config_factory())
    assert am.authenticate() == "abc"
    assert am.token == "abc"
    assert seen["token_url"] == (
        "https://login.microsoftonline.com/contoso.onmicrosoft.com/oauth2/v2.0/token"
    )
    assert seen["client_id"] == "client-1"
    assert seen["client_secret"] == "secret-1"
    assert seen["scope"] == ["https://graph.microsoft.com/.default"]


def test_authenticate_oauth_error(monkeypatch, config_factory):
    def fake_fetch_token(self, token_url=None, **kwargs):
        raise InvalidClientError(description="AADSTS7000215: Invalid client secret")

    monkeypatch.setattr(OAuth2Session, "fetch_token", fake_fetch_token)

    with pytest.raises(AuthError) as exc:
        AuthManager(config_factory()).authenticate()
    assert "AADSTS7000215" in str(exc.value)


def test_authenticate_transport_error(monkeypatch, config_factory):
    def fake_fetch_token(self, token_url=None, **kwargs):
        raise requests.exceptions.ConnectionError("no route")

    monkeypatch.setattr(OAuth2Session, "fetch_token", fake_fetch_token)

    with pytest.raises(AuthError):
        AuthManager(config_factory()).authenticate()


def test_authenticate_missing_access_token(monkeypatch, config_factory):
    monkeypatch.setattr(OAuth2Session, "fetch_token",
                        lambda self, token_url=None, **kwargs: {"token_type": "Bearer"})

    with pytest.raises(AuthError):
        AuthManager(config_factory()).authenticate()


def http_response(status_code, body: bytes, content_type):
    resp = requests.Response()
    resp.status_code = status_code
    resp._content = body
    resp.headers["Content-Type"] = content_type
    resp.encoding = "utf-8"
    return resp


def form_fields(data):
    if isinstance(data, dict):
        return data
    return dict(parse_qsl(data))


def test_token_endpoint_success(monkeypatch, config_factory):
    seen = {}

    def fake_request(self, method, url, **kwargs):
        seen["method"] = method
        seen["url"] = url
        seen["data"] = form_fields(kwargs.get("data"))
        body = b'{"token_type": "Bearer", "expires_in": 3599, "access_token": "eyJ0eXAi"}'
        return http_response(200, body, "application/json")

    monkeypatch.setattr(requests.Session, "request", fake_request)

    assert AuthManager(config_factory()).authenticate() == "eyJ0eXAi"
    assert seen["method"] == "POST"
    assert seen["url"].endswith("/contoso.onmicrosoft.com/oauth2/v2.0/token")
    assert seen["data"]["grant_type"] == "client_credentials"
    assert seen["data"]["client_id"] == "client-1"
    assert seen["data"]["client_secret"] == "secret-1"


@pytest.mark.parametrize(
    "status_code, body, content_type",
    [
        (401, b'{"error": "invalid_client", "error_description": "AADSTS7000215"}', "application/json"),
        (400, b'{"error": "invalid_request", "error_description": "AADSTS90002: tenant not found"}',
         "application/json"),
        (500, b"<html><body>Service unavailable</body></html>", "text/html"),
    ],
)
def test_token_endpoint_failure(monkeypatch, config_factory, status_code, body, content_type):
    monkeypatch.setattr(requests.Session, "request",
                        lambda self, method, url, **kw: http_response(status_code, body, content_type))

    with pytest.raises(AuthError):
        AuthManager(config_factory()).authenticate()
