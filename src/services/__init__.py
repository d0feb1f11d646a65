# src/services/__init__.py
"""
Сервисы приложения.

Все сервисы собираются в одно FastAPI-приложение (api) и работают в одном процессе.

Сервисы:
- api: сборка приложения, lifespan, обработчики ошибок, /health
- users_service: регистрация пассажиров и водителей, вход, свободные водители
- ride_service: жизненный цикл поездки + граф статусов
- realtime_ws: реестр WebSocket соединений и рассылка событий поездки
"""

__all__: list[str] = []
