"""
app_context.py
--------------
The application context handed to every handler.

Created once at startup with the database connection. Holds the services
and the signed-in owner of each chat: set by /login or /signup,
cleared by /signout.
"""

from dataclasses import dataclass, field
from typing import Optional

from telegram.ext import ContextTypes

from config import PAGE_SIZE
from db.connection import Database
from models.user import FarmUser
from services.auth_service import AuthService
from services.export_service import ExportService
from services.record_service import RecordService
from utils.logger import get_logger

logger = get_logger(__name__)

# Key under which the context is stored in Application.bot_data
APP_KEY = "farm_app"


@dataclass
class AppContext:
    """
    Attributes:
        database: The single open database connection.
        page_size: Rows per page for every listing.
        sessions: chat_id -> signed-in owner.
    """
    database: Database
    page_size: int = PAGE_SIZE
    sessions: dict[int, FarmUser] = field(default_factory=dict)

    def __post_init__(self):
        self.records = RecordService(self.database, self.page_size)
        self.auth = AuthService(self.database)
        self.exports = ExportService(self.records)

    def sign_in(self, chat_id: int, user: FarmUser) -> None:
        self.sessions[chat_id] = user
        logger.info(f"Chat {chat_id} signed in as {user}")

    def current_user(self, chat_id: int) -> Optional[FarmUser]:
        return self.sessions.get(chat_id)

    def sign_out(self, chat_id: int) -> Optional[FarmUser]:
        """Clear the chat's session; returns the owner that was signed in."""
        user = self.sessions.pop(chat_id, None)
        if user is not None:
            logger.info(f"Chat {chat_id} signed out ({user})")
        return user

    def close(self) -> None:
        self.sessions.clear()
        self.database.close()


def get_app(context: ContextTypes.DEFAULT_TYPE) -> AppContext:
    """Fetch the AppContext stored in the bot's shared data."""
    return context.bot_data[APP_KEY]
