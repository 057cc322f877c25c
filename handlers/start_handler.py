"""
handlers/start_handler.py
--------------------------
Handles /start, /help, /login, /signup and /signout.
"""

from telegram import Update
from telegram.error import TelegramError
from telegram.ext import ContextTypes

from app_context import get_app
from handlers.common import reply_for_error, run_blocking
from models.errors import EmailAlreadyRegisteredError, FarmKeeperError, InvalidCredentialsError
from security.auth import authorized_only
from security.rate_limiter import rate_limited
from utils.logger import get_logger

logger = get_logger(__name__)

HELP_TEXT = """
🐄 Farm Keeper - livestock and pasture records

Account:
/login <email> <password> - sign in
/signup <email> <password> [first name] [last name] - create an account
/signout - sign out

Records:
/routes - list record types
/records <route> [page] - browse a record type one page at a time
/fields <route> - show the columns of a record type
/add <route> col=value ... - add a record
/update <route> key=value -- col=value ... - change matching records
/delete <route> key=value ... - delete matching records
/export_csv <route> - download every record as CSV
/export_excel <route> - download every record as Excel

Routes: livestock, vaccinations, vetVisits, pastureMaintenance,
medication, calves, pastures
"""


async def _forget_credentials(update: Update) -> None:
    """Delete the message that carried a password."""
    try:
        await update.message.delete()
    except TelegramError as e:
        logger.warning(f"Could not delete credentials message: {e}")


@authorized_only
@rate_limited
async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start command - greet and point at /login."""
    owner = get_app(context).current_user(update.effective_chat.id)
    if owner is not None:
        await update.message.reply_text(f"Welcome back, {owner.display_name}! Type /help for commands.")
        return
    await update.message.reply_text(
        "👋 Farm Keeper tracks your livestock, vet visits, medication and pastures.\n"
        "Sign in with /login <email> <password> or create an account with /signup.\n\n"
        "Type /help to see every command."
    )


@authorized_only
@rate_limited
async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /help command - show all available commands."""
    await update.message.reply_text(HELP_TEXT)


@authorized_only
@rate_limited
async def login_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /login <email> <password>.
    The message is deleted afterwards so the password does not stay in the chat.
    """
    app = get_app(context)
    args = context.args or []
    if len(args) != 2:
        await update.message.reply_text("⚠️ Usage: /login <email> <password>")
        return

    email, password = args
    await _forget_credentials(update)
    try:
        user = await run_blocking(app.auth.login, email, password)
    except InvalidCredentialsError:
        await update.effective_chat.send_message("⛔ Invalid email and password combination.")
        return
    except FarmKeeperError as e:
        await reply_for_error(update, e)
        return

    app.sign_in(update.effective_chat.id, user)
    await update.effective_chat.send_message(f"✅ Signed in as {user.display_name}. Try /records livestock")


@authorized_only
@rate_limited
async def signup_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /signup <email> <password> [first name] [last name]."""
    app = get_app(context)
    args = context.args or []
    if len(args) < 2:
        await update.message.reply_text("⚠️ Usage: /signup <email> <password> [first name] [last name]")
        return

    email, password = args[0], args[1]
    first_name = args[2] if len(args) > 2 else None
    last_name = " ".join(args[3:]) or None
    await _forget_credentials(update)
    try:
        user = await run_blocking(app.auth.signup, email, password, first_name, last_name)
    except EmailAlreadyRegisteredError:
        await update.effective_chat.send_message("⚠️ That email is already registered. Use /login instead.")
        return
    except FarmKeeperError as e:
        await reply_for_error(update, e)
        return

    app.sign_in(update.effective_chat.id, user)
    await update.effective_chat.send_message(f"✅ Account created. Signed in as {user.display_name}.")


@authorized_only
async def signout_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /signout - clear the chat's session."""
    user = get_app(context).sign_out(update.effective_chat.id)
    if user is None:
        await update.message.reply_text("You are not signed in.")
        return
    await update.message.reply_text("👋 Signed out.")
