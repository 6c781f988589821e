from telegram import Update
from telegram.ext import ContextTypes

from decorators.admin import admin_only
from services.draft_engine import MAP_COUNTS
from services.game_manager import BEST_OF


def _bulk_text(message_text: str) -> str:
    """Everything after the command, one name per line"""
    lines = (message_text or "").split("\n")
    first = lines[0].split(maxsplit=1)
    names = ([first[1]] if len(first) > 1 else []) + lines[1:]
    return "\n".join(names)


class RosterHandlers:
    def __init__(self, game_manager, draft_handlers):
        self.game_manager = game_manager
        self.draft_handlers = draft_handlers

    async def add_player(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        chat_id = update.effective_chat.id
        engine = self.game_manager.get_engine(chat_id)

        if not context.args:
            await update.message.reply_text(
                "Please provide the player name.\nUsage: /add PlayerName"
            )
            return

        player_name = " ".join(context.args)
        if engine.roster.is_full:
            await update.message.reply_text("Roster is full!")
            return

        if not engine.add_player(player_name):
            await update.message.reply_text(
                f"Player named '{player_name.strip()}' already exists!"
            )
            return

        await self.draft_handlers.process_events(chat_id, context)
        await self.game_manager.update_roster_message(chat_id, context)

    async def bulk_add(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """
        Add several players at once, one per line:

        /bulk
        Alice
        Bob
        """
        chat_id = update.effective_chat.id
        engine = self.game_manager.get_engine(chat_id)

        added = engine.add_players(_bulk_text(update.message.text))
        if not added:
            await update.message.reply_text(
                f"No new players added. Send one name per line after /bulk "
                f"(max {engine.roster.slots_left} more)."
            )
            return

        await self.draft_handlers.process_events(chat_id, context)
        await self.game_manager.update_roster_message(chat_id, context)

    async def remove_player(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        chat_id = update.effective_chat.id
        engine = self.game_manager.get_engine(chat_id)

        if not context.args:
            await update.message.reply_text(
                "Please provide the player name.\nUsage: /remove PlayerName"
            )
            return

        player_name = " ".join(context.args)
        if not engine.remove_player(player_name):
            await update.message.reply_text(f"No player found with name: {player_name}")
            return

        await self.draft_handlers.process_events(chat_id, context)
        await self.game_manager.update_roster_message(chat_id, context)

    @admin_only
    async def clear_roster(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        chat_id = update.effective_chat.id
        engine = self.game_manager.get_engine(chat_id)
        engine.clear_roster()
        await update.message.reply_text("Roster cleared!")
        await self.draft_handlers.process_events(chat_id, context)

    async def list_players(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        chat_id = update.effective_chat.id
        await self.game_manager.update_roster_message(chat_id, context)

    async def set_map_count(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        chat_id = update.effective_chat.id
        engine = self.game_manager.get_engine(chat_id)

        try:
            if not context.args or len(context.args) != 1:
                raise ValueError
            count = int(context.args[0])
            if count not in MAP_COUNTS:
                raise ValueError
        except ValueError:
            await update.message.reply_text(
                f"Current setting: {BEST_OF[engine.map_count]}\n"
                "Usage: /maps 1|3|5"
            )
            return

        engine.set_map_count(count)
        await update.message.reply_text(f"Map count set to {BEST_OF[count]}")
