import os
from functools import wraps
from telegram import Update
from telegram.ext import ContextTypes


def get_admin_ids() -> list[int]:
    admin_ids_str = os.getenv("ADMIN_IDS", "")
    return [int(id_str) for id_str in admin_ids_str.split(",") if id_str.strip()]


def admin_only(func):
    """
    Decorator to restrict commands and buttons to admins listed in ADMIN_IDS.
    When ADMIN_IDS is empty everyone counts as an admin.
    """

    @wraps(func)
    async def wrapper(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        admin_ids = get_admin_ids()
        if admin_ids and update.effective_user.id not in admin_ids:
            if update.callback_query:
                await update.callback_query.answer("That's only for admins!")
            else:
                await update.effective_message.reply_text(
                    "This command is only available to admins."
                )
            return
        return await func(self, update, context)

    return wrapper
