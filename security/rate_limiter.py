"""
security/rate_limiter.py
-------------------------
Limits how many commands a Telegram user can send within a time window.
"""

import time
from functools import wraps
from typing import Callable, Optional

from telegram import Update
from telegram.ext import ContextTypes

from config import RATE_LIMIT_MESSAGES, RATE_LIMIT_WINDOW_SECONDS
from utils.logger import get_logger

logger = get_logger(__name__)


class RateLimiter:
    """Sliding-window counter of message timestamps per user."""

    def __init__(self, max_messages: int = RATE_LIMIT_MESSAGES,
                 window_seconds: float = RATE_LIMIT_WINDOW_SECONDS):
        self.max_messages = max_messages
        self.window_seconds = window_seconds
        self._timestamps: dict[int, list[float]] = {}
        self._last_sweep = 0.0

    def allow(self, user_id: int, now: Optional[float] = None) -> bool:
        """Record a message and return False if the user is over the limit."""
        now = time.time() if now is None else now
        cutoff = now - self.window_seconds
        self._sweep(now, cutoff)
        recent = [t for t in self._timestamps.get(user_id, []) if t > cutoff]
        if len(recent) >= self.max_messages:
            self._timestamps[user_id] = recent
            return False
        recent.append(now)
        self._timestamps[user_id] = recent
        return True

    def _sweep(self, now: float, cutoff: float) -> None:
        """Forget users whose every timestamp has left the window, at most once per window."""
        if now - self._last_sweep < self.window_seconds:
            return
        self._last_sweep = now
        idle = [user_id for user_id, stamps in self._timestamps.items() if not stamps or stamps[-1] <= cutoff]
        for user_id in idle:
            del self._timestamps[user_id]


_limiter = RateLimiter()


def rate_limited(func: Callable):
    """
    Decorator that enforces rate limiting per user.

    Configuration (via .env):
        RATE_LIMIT_MESSAGES: Max messages per window (default: 30).
        RATE_LIMIT_WINDOW_SECONDS: Window duration in seconds (default: 60).
    """
    @wraps(func)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE, *args, **kwargs):
        user = update.effective_user
        if not user:
            return

        if not _limiter.allow(user.id):
            logger.warning(f"⚠️ Rate limit hit for user {user.id}")
            await update.message.reply_text("⚠️ Too many messages. Wait a moment and try again.")
            return

        return await func(update, context, *args, **kwargs)

    return wrapper
