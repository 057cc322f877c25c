"""
handlers/records_handler.py
---------------------------
Browsing and editing farm records.
Delegates all logic to RecordService.
"""

from telegram import Update
from telegram.ext import ContextTypes

from app_context import get_app
from handlers.common import parse_assignments, reply_for_error, routes_text, run_blocking
from models.errors import FarmKeeperError
from models.user import FarmUser
from security.auth import authorized_only, login_required
from security.rate_limiter import rate_limited
from utils.logger import get_logger

logger = get_logger(__name__)

# Separates identifying columns from new values in /update
_UPDATE_SEPARATOR = "--"


@authorized_only
@rate_limited
async def routes_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /routes - list the record types."""
    await update.message.reply_text(routes_text())


@authorized_only
@rate_limited
@login_required
async def records_command(update: Update, context: ContextTypes.DEFAULT_TYPE, owner: FarmUser) -> None:
    """
    Handle /records <route> [page] - show one page of records.

    Usage:
        /records livestock
        /records vetVisits 2
    """
    app = get_app(context)
    args = context.args or []
    if not args:
        await update.message.reply_text(f"⚠️ Usage: /records <route> [page]\n{routes_text()}")
        return

    route = args[0]
    try:
        page_number = int(args[1]) if len(args) > 1 else 1
    except ValueError:
        await update.message.reply_text("⚠️ The page must be a whole number.")
        return

    try:
        result = await run_blocking(app.records.fetch_page, owner.user_id, route, page_number)
    except FarmKeeperError as e:
        await reply_for_error(update, e)
        return

    await update.message.reply_text(app.records.format_page(result, route))


@authorized_only
@rate_limited
@login_required
async def fields_command(update: Update, context: ContextTypes.DEFAULT_TYPE, owner: FarmUser) -> None:
    """Handle /fields <route> - list the columns of a record type."""
    app = get_app(context)
    if not context.args:
        await update.message.reply_text(f"⚠️ Usage: /fields <route>\n{routes_text()}")
        return

    route = context.args[0]
    try:
        names = await run_blocking(app.records.field_names, owner.user_id, route)
    except FarmKeeperError as e:
        await reply_for_error(update, e)
        return

    await update.message.reply_text(f"🧾 {route} columns:\n" + "\n".join(f"• {n}" for n in names))


@authorized_only
@rate_limited
@login_required
async def add_command(update: Update, context: ContextTypes.DEFAULT_TYPE, owner: FarmUser) -> None:
    """
    Handle /add <route> col=value ... - insert a record.

    Usage:
        /add livestock tag_number=A12 species=cattle breed=Angus
        /add vaccinations animal_id=3 vac_type=Blackleg date_given=2024-03-01
    """
    app = get_app(context)
    args = context.args or []
    if len(args) < 2:
        await update.message.reply_text("⚠️ Usage: /add <route> col=value ...\nSee /fields <route> for the columns.")
        return

    try:
        values = parse_assignments(args[1:])
    except ValueError as e:
        await update.message.reply_text(f"⚠️ {e}")
        return

    try:
        await run_blocking(app.records.add_record, owner.user_id, args[0], values)
    except FarmKeeperError as e:
        await reply_for_error(update, e)
        return

    await update.message.reply_text("✅ Saved!")


@authorized_only
@rate_limited
@login_required
async def update_command(update: Update, context: ContextTypes.DEFAULT_TYPE, owner: FarmUser) -> None:
    """
    Handle /update <route> key=value -- col=value ... - change matching records.

    Usage:
        /update livestock livestock_id=4 -- weight=540 notes=weaned
    """
    app = get_app(context)
    args = context.args or []
    if len(args) < 4 or _UPDATE_SEPARATOR not in args[1:]:
        await update.message.reply_text("⚠️ Usage: /update <route> key=value -- col=value ...")
        return

    split_at = args.index(_UPDATE_SEPARATOR, 1)
    try:
        identifying = parse_assignments(args[1:split_at])
        values = parse_assignments(args[split_at + 1:])
    except ValueError as e:
        await update.message.reply_text(f"⚠️ {e}")
        return

    try:
        count = await run_blocking(app.records.update_record, owner.user_id, args[0], identifying, values)
    except FarmKeeperError as e:
        await reply_for_error(update, e)
        return

    await update.message.reply_text(f"✏️ Updated {count} record(s).")


@authorized_only
@rate_limited
@login_required
async def delete_command(update: Update, context: ContextTypes.DEFAULT_TYPE, owner: FarmUser) -> None:
    """
    Handle /delete <route> key=value ... - delete matching records.

    Usage:
        /delete vetVisits visit_id=9
    """
    app = get_app(context)
    args = context.args or []
    if len(args) < 2:
        await update.message.reply_text("⚠️ Usage: /delete <route> key=value ...")
        return

    try:
        identifying = parse_assignments(args[1:])
    except ValueError as e:
        await update.message.reply_text(f"⚠️ {e}")
        return

    try:
        count = await run_blocking(app.records.delete_record, owner.user_id, args[0], identifying)
    except FarmKeeperError as e:
        await reply_for_error(update, e)
        return

    await update.message.reply_text(f"🗑️ Deleted {count} record(s).")
