# src/services/api/__init__.py
"""
API — единое FastAPI приложение: HTTP операции и WebSocket канал.
"""
