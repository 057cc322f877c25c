"""
security/ - Access Control
==========================
Handler decorators: Telegram allow-list, sign-in gate and rate limiting.
"""
