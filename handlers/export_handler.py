"""
handlers/export_handler.py
---------------------------
Handles data export commands (CSV, Excel).
Delegates to ExportService.
"""

from telegram import Update
from telegram.ext import ContextTypes

from app_context import get_app
from handlers.common import reply_for_error, routes_text, run_blocking
from models.errors import FarmKeeperError
from models.user import FarmUser
from security.auth import authorized_only, login_required
from security.rate_limiter import rate_limited
from utils.logger import get_logger

logger = get_logger(__name__)


async def _send_export(update: Update, context: ContextTypes.DEFAULT_TYPE, owner: FarmUser, kind: str) -> None:
    app = get_app(context)
    if not context.args:
        await update.message.reply_text(f"⚠️ Usage: /export_{kind} <route>\n{routes_text()}")
        return

    route = context.args[0]
    if kind == "csv":
        export, extension = app.exports.export_route_csv, "csv"
    else:
        export, extension = app.exports.export_route_excel, "xlsx"

    await update.message.reply_text(f"📄 Preparing {route} export...")
    try:
        buffer = await run_blocking(export, owner.user_id, route)
    except FarmKeeperError as e:
        await reply_for_error(update, e)
        return

    await update.message.reply_document(
        document=buffer,
        filename=f"{route}.{extension}",
        caption=f"📊 {route} - {extension.upper()}",
    )


@authorized_only
@rate_limited
@login_required
async def export_csv_command(update: Update, context: ContextTypes.DEFAULT_TYPE, owner: FarmUser) -> None:
    """Handle /export_csv <route> - send every record of a route as CSV."""
    await _send_export(update, context, owner, "csv")


@authorized_only
@rate_limited
@login_required
async def export_excel_command(update: Update, context: ContextTypes.DEFAULT_TYPE, owner: FarmUser) -> None:
    """Handle /export_excel <route> - send every record of a route as Excel."""
    await _send_export(update, context, owner, "excel")
