# src/services/realtime_ws/__init__.py
"""
Realtime WebSocket — live-обновления поездок.

Обеспечивает:
- Реестр соединений подписчиков (пассажиры и водители)
- Рассылку событий жизненного цикла поездки
- WebSocket endpoint с сообщением subscribe
"""
