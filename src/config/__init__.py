"""
Модуль конфигурации.
Экспортирует настройки приложения.
"""

from src.config.loader import Settings, get_settings, get_project_root, settings

__all__ = ["Settings", "get_settings", "get_project_root", "settings"]
