"""Tests for the Kakao HTTP client.

Kakao is replaced with an httpx.MockTransport (``FakeKakao`` in
tests/fakes.py), so request shapes and response decoding are checked without
network access.
"""
from __future__ import annotations

import datetime as dt
from types import SimpleNamespace
from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from app.core.config import settings
from app.models.models import Gender
from app.services.oauth import (
    ClientError,
    KakaoClient,
    KakaoConfig,
    ParseError,
    UnsupportedRegionError,
    UpstreamError,
    create_kakao_member_service,
    normalize_phone_number,
)
from tests.fakes import KAKAO_CONFIG, kakao_profile_payload


# ========== Token exchange ==========

@pytest.mark.asyncio
async def test_exchange_code_posts_form_and_returns_access_token(kakao_client, fake_kakao):
    token = await kakao_client.exchange_code("abc")

    assert token == "kakao-access-token"
    request = fake_kakao.requests[0]
    assert request.method == "POST"
    assert str(request.url) == "https://kauth.kakao.com/oauth/token"
    assert request.headers["content-type"].startswith("application/x-www-form-urlencoded")
    form = {key: values[0] for key, values in parse_qs(request.content.decode()).items()}
    assert form == {
        "grant_type": "authorization_code",
        "client_id": "test-client-id",
        "client_secret": "test-client-secret",
        "redirect_uri": "http://testserver/api/members/kakao/login",
        "code": "abc",
    }


@pytest.mark.asyncio
async def test_exchange_code_non_success_raises_upstream_error(kakao_client, fake_kakao):
    fake_kakao.token_status = 500

    with pytest.raises(UpstreamError) as exc_info:
        await kakao_client.exchange_code("abc")

    assert exc_info.value.upstream_status == 500
    assert exc_info.value.details == {"upstream_status": 500}


@pytest.mark.asyncio
async def test_exchange_code_without_access_token_raises_parse_error(kakao_client, fake_kakao):
    fake_kakao.token_body = {"token_type": "bearer"}

    with pytest.raises(ParseError) as exc_info:
        await kakao_client.exchange_code("abc")

    assert exc_info.value.field == "access_token"


@pytest.mark.asyncio
async def test_connection_failure_raises_upstream_error():
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = KakaoClient(KAKAO_CONFIG, transport=httpx.MockTransport(refuse))

    with pytest.raises(UpstreamError) as exc_info:
        await client.exchange_code("abc")

    assert exc_info.value.upstream_status == 502


# ========== Profile fetch ==========

@pytest.mark.asyncio
async def test_fetch_profile_decodes_and_normalizes(kakao_client, fake_kakao):
    profile = await kakao_client.fetch_profile("kakao-access-token")

    assert profile.name == "홍길동"
    assert profile.email == "new@x.com"
    assert profile.gender is Gender.MALE
    assert profile.birth == dt.date(1995, 3, 14)
    assert profile.phone_number == "01012345678"

    request = fake_kakao.requests[0]
    assert request.method == "GET"
    assert str(request.url) == "https://kapi.kakao.com/v2/user/me"
    assert request.headers["authorization"] == "Bearer kakao-access-token"


@pytest.mark.asyncio
async def test_fetch_profile_rejects_foreign_phone_number(kakao_client, fake_kakao):
    fake_kakao.profile_body = kakao_profile_payload(phone_number="+1 2025550123")

    with pytest.raises(UnsupportedRegionError) as exc_info:
        await kakao_client.fetch_profile("kakao-access-token")

    assert exc_info.value.details == {"prefix": "+1"}


@pytest.mark.asyncio
async def test_fetch_profile_non_success_raises_upstream_error(kakao_client, fake_kakao):
    fake_kakao.profile_status = 401

    with pytest.raises(UpstreamError) as exc_info:
        await kakao_client.fetch_profile("expired-token")

    assert exc_info.value.upstream_status == 401


@pytest.mark.asyncio
async def test_fetch_profile_missing_phone_reports_field_path(kakao_client, fake_kakao):
    body = kakao_profile_payload()
    del body["kakao_account"]["phone_number"]
    fake_kakao.profile_body = body

    with pytest.raises(ParseError) as exc_info:
        await kakao_client.fetch_profile("kakao-access-token")

    assert exc_info.value.field == "kakao_account.phone_number"


@pytest.mark.asyncio
async def test_fetch_profile_missing_nickname_reports_field_path(kakao_client, fake_kakao):
    body = kakao_profile_payload()
    body["properties"] = {}
    fake_kakao.profile_body = body

    with pytest.raises(ParseError) as exc_info:
        await kakao_client.fetch_profile("kakao-access-token")

    assert exc_info.value.field == "properties.nickname"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("override", "field"),
    [
        ({"gender": "unknown"}, "kakao_account.gender"),
        ({"birthyear": "95"}, "kakao_account.birthyear"),
        ({"birthday": "1345"}, "kakao_account.birthday"),
        ({"email": None}, "kakao_account.email"),
    ],
)
async def test_fetch_profile_malformed_field(kakao_client, fake_kakao, override, field):
    fake_kakao.profile_body = kakao_profile_payload(**override)

    with pytest.raises(ParseError) as exc_info:
        await kakao_client.fetch_profile("kakao-access-token")

    assert exc_info.value.field == field


@pytest.mark.asyncio
async def test_fetch_profile_non_json_body(kakao_client, fake_kakao):
    fake_kakao.profile_body = "<html>bad gateway</html>"

    with pytest.raises(ParseError) as exc_info:
        await kakao_client.fetch_profile("kakao-access-token")

    assert exc_info.value.field == "<body>"


# ========== Unlink ==========

@pytest.mark.asyncio
async def test_unlink_posts_bearer_token(kakao_client, fake_kakao):
    await kakao_client.unlink("kakao-access-token")

    request = fake_kakao.requests[0]
    assert request.method == "POST"
    assert str(request.url) == "https://kapi.kakao.com/v1/user/unlink"
    assert request.headers["authorization"] == "Bearer kakao-access-token"


@pytest.mark.asyncio
async def test_unlink_failure_preserves_upstream_status(kakao_client, fake_kakao):
    fake_kakao.unlink_status = 401

    with pytest.raises(ClientError) as exc_info:
        await kakao_client.unlink("kakao-access-token")

    assert exc_info.value.upstream_status == 401
    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_unlink_server_error_maps_to_bad_gateway(kakao_client, fake_kakao):
    fake_kakao.unlink_status = 503

    with pytest.raises(ClientError) as exc_info:
        await kakao_client.unlink("kakao-access-token")

    assert exc_info.value.upstream_status == 503
    assert exc_info.value.status_code == 502


# ========== Helpers ==========

def test_authorization_url_carries_client_and_redirect(kakao_client):
    url = urlparse(kakao_client.authorization_url(state="xyz"))
    params = {key: values[0] for key, values in parse_qs(url.query).items()}

    assert f"{url.scheme}://{url.netloc}{url.path}" == "https://kauth.kakao.com/oauth/authorize"
    assert params == {
        "client_id": "test-client-id",
        "redirect_uri": "http://testserver/api/members/kakao/login",
        "response_type": "code",
        "state": "xyz",
    }


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("+82 1012345678", "01012345678"),
        ("+82 10-1234-5678", "010-1234-5678"),
        ("+82 2-123-4567", "02-123-4567"),
    ],
)
def test_normalize_phone_number_keeps_trailing_digits(raw, expected):
    assert normalize_phone_number(raw) == expected


@pytest.mark.parametrize("raw", ["+1 2025550123", "+820 1012345678", "010-1234-5678", "+82-10-1234-5678"])
def test_normalize_phone_number_rejects_other_regions(raw):
    with pytest.raises(UnsupportedRegionError):
        normalize_phone_number(raw)


def test_config_from_settings_requires_credentials():
    incomplete = SimpleNamespace(
        KAKAO_API_KEY=None,
        KAKAO_CLIENT_ID="id",
        KAKAO_CLIENT_SECRET=None,
        KAKAO_REDIRECT_URI=None,
        KAKAO_AUTH_HOST="https://kauth.kakao.com",
        KAKAO_API_HOST="https://kapi.kakao.com",
        KAKAO_HTTP_TIMEOUT=10.0,
    )

    with pytest.raises(ValueError, match="KAKAO_CLIENT_SECRET, KAKAO_REDIRECT_URI"):
        KakaoConfig.from_settings(incomplete)


def test_create_kakao_member_service_uses_settings(db_session):
    service = create_kakao_member_service(db_session)

    assert service.client.config.client_id == settings.KAKAO_CLIENT_ID
    assert service.client.config.timeout == settings.KAKAO_HTTP_TIMEOUT
    assert service.issuer.refresh_ttl == dt.timedelta(days=7)
