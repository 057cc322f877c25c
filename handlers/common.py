"""
handlers/common.py
------------------
Helpers shared by the handlers: argument parsing, running blocking
service calls off the event loop, and turning errors into replies.
"""

import asyncio
from functools import partial
from typing import Any, Callable, Optional, TypeVar

from telegram import Update

from models.errors import (
    FarmKeeperError,
    InvalidPageNumberError,
    InvalidRecordError,
    QueryExecutionError,
    UnknownRouteError,
)
from repositories.query_registry import route_names
from utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


async def run_blocking(func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Await a blocking service call on a worker thread."""
    return await asyncio.to_thread(partial(func, *args, **kwargs))


def parse_assignments(tokens: list[str]) -> dict[str, Optional[str]]:
    """
    Parse ['name=Bessie', 'weight=510'] into {'name': 'Bessie', 'weight': '510'}.
    The literal value 'null' becomes None.

    Raises:
        ValueError: If a token has no '=' or an empty column name.
    """
    values: dict[str, Optional[str]] = {}
    for token in tokens:
        column, sep, value = token.partition("=")
        if not sep or not column:
            raise ValueError(f"Expected column=value, got {token!r}")
        values[column] = None if value.lower() == "null" else value
    return values


def routes_text() -> str:
    return "Available routes: " + ", ".join(route_names())


async def reply_for_error(update: Update, error: FarmKeeperError) -> None:
    """Reply with a message suited to a known application error."""
    if isinstance(error, UnknownRouteError):
        text = f"⚠️ Unknown route '{error.route}'.\n{routes_text()}"
    elif isinstance(error, InvalidPageNumberError):
        text = "⚠️ Page numbers start at 1."
    elif isinstance(error, InvalidRecordError):
        text = f"⚠️ {error}"
    elif isinstance(error, QueryExecutionError):
        logger.error(f"Query failed for chat {update.effective_chat.id}: {error}")
        text = "❌ Something went wrong talking to the database. Try again."
    else:
        logger.error(f"Internal error: {error}")
        text = "❌ Internal error."
    await update.effective_chat.send_message(text)
