"""
security/auth.py
-----------------
Access control for the Telegram handlers.

    authorized_only  - blocks Telegram accounts missing from ALLOWED_USER_IDS.
    login_required   - blocks chats with no signed-in farm owner and passes
                       the owner to the handler as a third argument.
"""

from functools import wraps
from typing import Callable

from telegram import Update
from telegram.ext import ContextTypes

from app_context import get_app
from config import ALLOWED_USER_IDS
from utils.logger import get_logger

logger = get_logger(__name__)


def authorized_only(func: Callable):
    """
    Decorator that restricts a handler to whitelisted Telegram users.

    Behavior:
        - If ALLOWED_USER_IDS is empty, ALL users are allowed.
        - If the list is set, only those users can use the bot.
        - Unauthorized attempts are logged.
    """
    @wraps(func)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE, *args, **kwargs):
        user = update.effective_user
        if not user:
            return

        if ALLOWED_USER_IDS and user.id not in ALLOWED_USER_IDS:
            logger.warning(
                f"🚫 Unauthorized access attempt: user_id={user.id}, "
                f"username={user.username}"
            )
            await update.message.reply_text("⛔ This bot is private.")
            return

        return await func(update, context, *args, **kwargs)

    return wrapper


def login_required(func: Callable):
    """
    Decorator for handlers that work on an owner's records.

    Usage:
        @login_required
        async def my_handler(update, context, owner):
            ...
    """
    @wraps(func)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE, *args, **kwargs):
        chat = update.effective_chat
        if not chat:
            return

        owner = get_app(context).current_user(chat.id)
        if owner is None:
            await update.message.reply_text("🔒 Please sign in first: /login <email> <password>")
            return

        return await func(update, context, owner, *args, **kwargs)

    return wrapper
