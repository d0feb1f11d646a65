# src/infra/identity_provider.py
"""
Клиент внешнего провайдера аутентификации (Supabase Auth / GoTrue REST API).

Используется только для:
- создания аккаунта по email/паролю (admin API, email сразу подтверждён)
- входа по паролю с выдачей пары access/refresh токенов
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

from src.common.logger import log_error, log_info
from src.common.constants import TypeMsg
from src.shared.exceptions import AuthenticationError, IdentityProviderError


@dataclass(frozen=True)
class ProviderAccount:
    """Аккаунт у провайдера."""
    id: str
    email: str | None = None


@dataclass(frozen=True)
class AuthSession:
    """Сессия, выданная провайдером при входе."""
    access_token: str
    refresh_token: str
    account: ProviderAccount


def _extract_error(response: httpx.Response) -> str:
    """Достаёт человекочитаемое сообщение из ответа GoTrue."""
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"

    if isinstance(body, dict):
        for key in ("msg", "message", "error_description", "error"):
            if body.get(key):
                return str(body[key])
    return f"HTTP {response.status_code}"


class IdentityProvider:
    """
    Асинхронный клиент GoTrue.

    Args:
        base_url: URL вида https://<project>.supabase.co/auth/v1
        service_role_key: ключ для admin API
        anon_key: публичный ключ для входа по паролю
        timeout: таймаут запросов (секунды)
        transport: транспорт httpx (подменяется в тестах)
    """

    def __init__(
        self,
        base_url: str,
        service_role_key: str,
        anon_key: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._service_role_key = service_role_key
        self._anon_key = anon_key
        self.client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def close(self) -> None:
        await self.client.aclose()

    async def _post(self, path: str, json: dict[str, Any], key: str, params: dict[str, str] | None = None) -> httpx.Response:
        headers = {"apikey": key, "Authorization": f"Bearer {key}"}
        try:
            return await self.client.post(path, json=json, params=params, headers=headers)
        except httpx.HTTPError as e:
            await log_error(f"Провайдер аутентификации недоступен: {e}")
            raise IdentityProviderError(f"Identity provider unavailable: {e}") from e

    async def create_account(self, email: str, password: str) -> ProviderAccount:
        """
        Создаёт подтверждённый аккаунт.

        Raises:
            IdentityProviderError: провайдер отклонил запрос (сообщение провайдера сохраняется)
        """
        response = await self._post(
            "/admin/users",
            json={"email": email, "password": password, "email_confirm": True},
            key=self._service_role_key,
        )
        if response.is_error:
            message = _extract_error(response)
            await log_info(f"Провайдер отклонил создание аккаунта {email}: {message}", type_msg=TypeMsg.WARNING)
            raise IdentityProviderError(message)

        data = response.json()
        # admin API возвращает пользователя либо напрямую, либо в поле user
        user = data.get("user", data)
        return ProviderAccount(id=str(user["id"]), email=user.get("email"))

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        """
        Вход по паролю.

        Raises:
            AuthenticationError: неверные учётные данные
            IdentityProviderError: провайдер недоступен или ответил 5xx
        """
        response = await self._post(
            "/token",
            json={"email": email, "password": password},
            key=self._anon_key,
            params={"grant_type": "password"},
        )
        if response.status_code >= 500:
            raise IdentityProviderError(_extract_error(response))
        if response.is_error:
            raise AuthenticationError("Invalid email or password")

        data = response.json()
        user = data["user"]
        return AuthSession(
            access_token=data["access_token"],
            refresh_token=data["refresh_token"],
            account=ProviderAccount(id=str(user["id"]), email=user.get("email")),
        )


_identity_provider: IdentityProvider | None = None


def get_identity_provider() -> IdentityProvider:
    """Возвращает глобальный клиент провайдера (создаётся лениво из настроек)."""
    global _identity_provider
    if _identity_provider is None:
        from src.config import settings

        _identity_provider = IdentityProvider(
            base_url=settings.identity.auth_url,
            service_role_key=settings.identity.SUPABASE_SERVICE_ROLE_KEY,
            anon_key=settings.identity.SUPABASE_ANON_KEY,
            timeout=settings.identity.IDENTITY_TIMEOUT,
        )
    return _identity_provider


async def close_identity_provider() -> None:
    """Закрывает HTTP-клиент провайдера."""
    global _identity_provider
    if _identity_provider is not None:
        await _identity_provider.close()
        _identity_provider = None
