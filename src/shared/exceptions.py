# src/shared/exceptions.py
"""
Таксономия ошибок сервисов.

Каждая ошибка знает свой HTTP-статус и машинный код;
обработчики FastAPI превращают их в ответ {"error": ..., "error_code": ...}.
"""

from __future__ import annotations


class ServiceError(Exception):
    """Базовая ошибка сервиса."""

    status_code: int = 500
    error_code: str = "internal_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ClientInputError(ServiceError):
    """Отсутствует или невалидно обязательное поле. Запись в хранилище не выполняется."""

    status_code = 400
    error_code = "invalid_input"


class InvalidTransitionError(ServiceError):
    """Переход статуса вне графа (только в строгом режиме)."""

    status_code = 409
    error_code = "invalid_transition"


class AuthenticationError(ServiceError):
    """Неверный email или пароль."""

    status_code = 401
    error_code = "authentication_failed"


class UserNotFoundError(ServiceError):
    """Аккаунт провайдера есть, локальной записи пользователя нет."""

    status_code = 404
    error_code = "user_not_found"


class IdentityProviderError(ServiceError):
    """Провайдер аутентификации отклонил запрос или недоступен."""

    error_code = "identity_provider_error"


class StoreError(ServiceError):
    """Ошибка хранилища: создание, обновление или поиск (включая «запись не найдена»)."""

    error_code = "store_error"
