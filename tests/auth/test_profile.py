import httpx
import pytest
from pytest import MonkeyPatch

from ssofed.auth.config import SsoProviderConfigModel, resolve_provider_config
from ssofed.auth.contracts import SsoProfileShapeError, SsoProtocolError, SsoTransportError
from ssofed.auth.profile import fetch_profile, map_profile
from tests.auth.http_testkit import FakeAsyncHttpClient, FakeResponse, patch_http_client

# ── Fetching ───────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_fetch_profile_sends_bearer_token(
    monkeypatch: MonkeyPatch, sso_config: SsoProviderConfigModel
) -> None:
    payload = {"data": {"id": 42, "email": "a@b.com", "name": "A"}}
    fake_client = FakeAsyncHttpClient(responses={"/api/oauth/user": FakeResponse(200, payload)})
    patch_http_client(monkeypatch, fake_client)

    profile = await fetch_profile(sso_config, "at")

    assert profile == payload
    [request] = fake_client.requests
    assert request.method == "POST"
    assert request.url == "https://sso.example.com/api/oauth/user"
    assert request.kwargs["headers"] == {
        "Accept": "application/json",
        "Authorization": "Bearer at",
    }


@pytest.mark.asyncio
async def test_fetch_profile_with_get(
    monkeypatch: MonkeyPatch, make_source, base_settings
) -> None:
    config = resolve_provider_config(make_source(**base_settings, user_endpoint_method="GET"))
    fake_client = FakeAsyncHttpClient(default_response=FakeResponse(200, {"data": {}}))
    patch_http_client(monkeypatch, fake_client)

    await fetch_profile(config, "at")

    assert fake_client.requests[0].method == "GET"


@pytest.mark.asyncio
async def test_fetch_profile_client_error(
    monkeypatch: MonkeyPatch, sso_config: SsoProviderConfigModel
) -> None:
    body = '{"message":"Unauthenticated."}'
    patch_http_client(
        monkeypatch, FakeAsyncHttpClient(default_response=FakeResponse(401, raw_text=body))
    )
    with pytest.raises(SsoProtocolError) as exc_info:
        await fetch_profile(sso_config, "expired")
    assert exc_info.value.body == body
    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_fetch_profile_transport_error(
    monkeypatch: MonkeyPatch, sso_config: SsoProviderConfigModel
) -> None:
    patch_http_client(
        monkeypatch, FakeAsyncHttpClient(error=httpx.ConnectError("certificate verify failed"))
    )
    with pytest.raises(SsoTransportError) as exc_info:
        await fetch_profile(sso_config, "at")
    assert exc_info.value.endpoint == "https://sso.example.com/api/oauth/user"


# ── Mapping ────────────────────────────────────────────────────────────


def test_map_wrapped_profile(sso_config: SsoProviderConfigModel) -> None:
    user = map_profile(sso_config, {"data": {"id": "42", "email": "a@b.com", "name": "A"}})
    assert user.id == "42"
    assert user.email == "a@b.com"
    assert user.name == "A"
    assert user.nickname == "A"
    assert user.raw == {"id": "42", "email": "a@b.com", "name": "A"}


def test_integer_id_becomes_string(sso_config: SsoProviderConfigModel) -> None:
    user = map_profile(sso_config, {"data": {"id": 42, "email": "a@b.com", "name": "A"}})
    assert user.id == "42"


def test_missing_required_field_is_named(make_source, base_settings) -> None:
    config = resolve_provider_config(
        make_source(**base_settings, provider_user_endpoint_data_wrap_key="")
    )
    with pytest.raises(SsoProfileShapeError) as exc_info:
        map_profile(config, {"id": "42", "email": "a@b.com"})
    assert exc_info.value.missing_fields == ["name"]
    assert "name" in str(exc_info.value)
    assert exc_info.value.wrap_key_missing is False


def test_missing_wrap_key_names_wrap_key_only(sso_config: SsoProviderConfigModel) -> None:
    with pytest.raises(SsoProfileShapeError) as exc_info:
        map_profile(sso_config, {"id": "42", "email": "a@b.com", "name": "A"})
    error = exc_info.value
    assert error.wrap_key_missing is True
    assert error.wrap_key == "data"
    assert error.missing_fields == []
    assert "`data`" in str(error)
    assert "email" not in str(error)


def test_wrap_key_must_hold_an_object(sso_config: SsoProviderConfigModel) -> None:
    with pytest.raises(SsoProfileShapeError) as exc_info:
        map_profile(sso_config, {"data": None})
    assert exc_info.value.wrap_key_missing is True


def test_all_missing_fields_are_reported(sso_config: SsoProviderConfigModel) -> None:
    with pytest.raises(SsoProfileShapeError) as exc_info:
        map_profile(sso_config, {"data": {"id": "42"}})
    assert exc_info.value.missing_fields == ["email", "name"]
    assert "`data`" in str(exc_info.value)


def test_custom_id_field_and_required_keys(make_source, base_settings) -> None:
    config = resolve_provider_config(
        make_source(
            **base_settings,
            provider_user_endpoint_data_wrap_key="user",
            provider_user_endpoint_keys="uuid,email,name",
            provider_id="uuid",
        )
    )
    user = map_profile(
        config, {"user": {"uuid": "u-1", "id": 7, "email": "a@b.com", "name": "A"}}
    )
    assert user.id == "u-1"


def test_dotted_paths_reach_nested_fields(make_source, base_settings) -> None:
    config = resolve_provider_config(
        make_source(
            **base_settings,
            provider_user_endpoint_data_wrap_key="",
            provider_user_endpoint_keys="account.id,email,name",
            provider_id="account.id",
        )
    )
    user = map_profile(config, {"account": {"id": 9}, "email": "a@b.com", "name": "A"})
    assert user.id == "9"


def test_dotted_wrap_key(make_source, base_settings) -> None:
    config = resolve_provider_config(
        make_source(**base_settings, provider_user_endpoint_data_wrap_key="response.user")
    )
    user = map_profile(
        config, {"response": {"user": {"id": "1", "email": "a@b.com", "name": "A"}}}
    )
    assert user.email == "a@b.com"


def test_empty_canonical_values_are_rejected(sso_config: SsoProviderConfigModel) -> None:
    with pytest.raises(SsoProfileShapeError) as exc_info:
        map_profile(sso_config, {"data": {"id": "42", "email": "", "name": "A"}})
    assert exc_info.value.missing_fields == ["email"]


def test_name_required_even_if_not_configured(make_source, base_settings) -> None:
    config = resolve_provider_config(
        make_source(**base_settings, provider_user_endpoint_keys="id,email")
    )
    with pytest.raises(SsoProfileShapeError) as exc_info:
        map_profile(config, {"data": {"id": "42", "email": "a@b.com"}})
    assert exc_info.value.missing_fields == ["name"]
