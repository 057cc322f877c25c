"""
main.py
-------
Entry point for the Farm Keeper Telegram bot.

Responsibilities:
    - Open the database connection and make sure the schema exists.
    - Build the AppContext and hand it to the bot.
    - Register every handler and start polling.
"""

from telegram import BotCommand, Update
from telegram.ext import Application, CommandHandler, ContextTypes

from app_context import APP_KEY, AppContext
from config import PAGE_SIZE, TELEGRAM_BOT_TOKEN
from db.connection import Database
from db.init_db import create_tables
from handlers.export_handler import export_csv_command, export_excel_command
from handlers.records_handler import (
    add_command,
    delete_command,
    fields_command,
    records_command,
    routes_command,
    update_command,
)
from handlers.start_handler import (
    help_command,
    login_command,
    signout_command,
    signup_command,
    start_command,
)
from utils.logger import get_logger

logger = get_logger(__name__)

COMMANDS = [
    ("start", start_command, "🚀 Start"),
    ("help", help_command, "📖 Show help"),
    ("login", login_command, "🔑 Sign in"),
    ("signup", signup_command, "📝 Create an account"),
    ("signout", signout_command, "👋 Sign out"),
    ("routes", routes_command, "📚 List record types"),
    ("records", records_command, "📋 Browse records"),
    ("fields", fields_command, "🧾 Show a record type's columns"),
    ("add", add_command, "➕ Add a record"),
    ("update", update_command, "✏️ Update records"),
    ("delete", delete_command, "🗑️ Delete records"),
    ("export_csv", export_csv_command, "📄 Export CSV"),
    ("export_excel", export_excel_command, "📊 Export Excel"),
]


async def set_bot_commands(application: Application) -> None:
    """Register bot commands menu in Telegram on startup."""
    await application.bot.set_my_commands(
        [BotCommand(name, description) for name, _, description in COMMANDS]
    )
    logger.info("Bot commands menu registered successfully.")


async def close_app(application: Application) -> None:
    """Close the database connection on shutdown."""
    app = application.bot_data.get(APP_KEY)
    if app is not None:
        app.close()


async def on_error(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Log errors no handler dealt with and tell the user something failed."""
    logger.error("Unhandled exception while handling an update", exc_info=context.error)
    if isinstance(update, Update) and update.effective_chat:
        await update.effective_chat.send_message("❌ Something went wrong. Please try again.")


def build_application(app: AppContext) -> Application:
    """Create the Telegram application with every handler registered."""
    application = (
        Application.builder()
        .token(TELEGRAM_BOT_TOKEN)
        .post_init(set_bot_commands)
        .post_shutdown(close_app)
        .build()
    )
    application.bot_data[APP_KEY] = app

    for name, callback, _ in COMMANDS:
        application.add_handler(CommandHandler(name, callback))
    application.add_error_handler(on_error)
    return application


def main() -> None:
    """Initialize and run the bot."""

    # ── 1. Database setup ─────────────────────────────────
    logger.info("Initializing database...")
    database = Database.connect()
    create_tables(database)

    # ── 2. Build the Telegram application ─────────────────
    logger.info("Starting Telegram bot...")
    application = build_application(AppContext(database=database, page_size=PAGE_SIZE))

    # ── 3. Start polling ──────────────────────────────────
    logger.info("🐄 Farm Keeper is running! Press Ctrl+C to stop.")
    application.run_polling(drop_pending_updates=True, allowed_updates=["message"])
    logger.info("Farm Keeper stopped.")


if __name__ == "__main__":
    main()
