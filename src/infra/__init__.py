# src/infra/__init__.py
"""
Инфраструктурный слой.
Работа с внешними сервисами: PostgreSQL (хранилище) и Supabase Auth (провайдер аутентификации).
"""

from src.infra.database import DatabaseManager, get_db
from src.infra.identity_provider import IdentityProvider, get_identity_provider

__all__ = [
    "DatabaseManager",
    "get_db",
    "IdentityProvider",
    "get_identity_provider",
]
