# tests/infra/test_identity_provider.py
"""
Тесты клиента провайдера аутентификации (httpx.MockTransport).
"""

from __future__ import annotations

import json

import httpx
import pytest

from src.infra.identity_provider import IdentityProvider
from src.shared.exceptions import AuthenticationError, IdentityProviderError


def make_provider(handler) -> IdentityProvider:
    return IdentityProvider(
        base_url="https://project.supabase.test/auth/v1",
        service_role_key="service-key",
        anon_key="anon-key",
        transport=httpx.MockTransport(handler),
    )


class TestCreateAccount:
    """Тесты создания аккаунта."""

    @pytest.mark.asyncio
    async def test_success(self) -> None:
        seen: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["apikey"] = request.headers["apikey"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"id": "auth-1", "email": "anna@example.com"})

        provider = make_provider(handler)
        account = await provider.create_account("anna@example.com", "secret")
        await provider.close()

        assert account.id == "auth-1"
        assert account.email == "anna@example.com"
        assert seen["path"] == "/auth/v1/admin/users"
        assert seen["apikey"] == "service-key"
        assert seen["body"] == {"email": "anna@example.com", "password": "secret", "email_confirm": True}

    @pytest.mark.asyncio
    async def test_nested_user(self) -> None:
        provider = make_provider(lambda request: httpx.Response(200, json={"user": {"id": "auth-2"}}))

        account = await provider.create_account("x@example.com", "secret")

        assert account.id == "auth-2"
        assert account.email is None

    @pytest.mark.asyncio
    async def test_rejected_keeps_provider_message(self) -> None:
        provider = make_provider(
            lambda request: httpx.Response(422, json={"msg": "A user with this email address has already been registered"})
        )

        with pytest.raises(IdentityProviderError, match="already been registered"):
            await provider.create_account("anna@example.com", "secret")

    @pytest.mark.asyncio
    async def test_network_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        provider = make_provider(handler)

        with pytest.raises(IdentityProviderError):
            await provider.create_account("anna@example.com", "secret")


class TestSignIn:
    """Тесты входа по паролю."""

    @pytest.mark.asyncio
    async def test_success(self) -> None:
        seen: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["grant_type"] = request.url.params.get("grant_type")
            seen["apikey"] = request.headers["apikey"]
            return httpx.Response(200, json={
                "access_token": "access",
                "refresh_token": "refresh",
                "user": {"id": "auth-1", "email": "anna@example.com"},
            })

        provider = make_provider(handler)
        session = await provider.sign_in_with_password("anna@example.com", "secret")

        assert session.access_token == "access"
        assert session.refresh_token == "refresh"
        assert session.account.id == "auth-1"
        assert seen == {"grant_type": "password", "apikey": "anon-key"}

    @pytest.mark.asyncio
    async def test_invalid_credentials(self) -> None:
        provider = make_provider(
            lambda request: httpx.Response(400, json={"error": "invalid_grant", "error_description": "Invalid login credentials"})
        )

        with pytest.raises(AuthenticationError, match="Invalid email or password"):
            await provider.sign_in_with_password("anna@example.com", "wrong")

    @pytest.mark.asyncio
    async def test_provider_down(self) -> None:
        provider = make_provider(lambda request: httpx.Response(503, text="upstream unavailable"))

        with pytest.raises(IdentityProviderError, match="upstream unavailable"):
            await provider.sign_in_with_password("anna@example.com", "secret")
