import logging
import time

from telegram import Update
from telegram.ext import ContextTypes

from decorators.admin import admin_only
from models.draft import DRAW_INSTANT, DRAW_MODE_ALIASES
from services.game_manager import format_discord

logger = logging.getLogger(__name__)

# Telegram rate-limits edits, the wheel is only redrawn this often
BOARD_EDIT_INTERVAL = 0.8

SIDE_EVENTS = {
    "side_decision_started",
    "side_toss_started",
    "side_toss_result",
    "side_complete",
}


class DraftHandlers:
    def __init__(self, game_manager):
        self.game_manager = game_manager
        self.last_board_edit = {}

    async def draw(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        chat_id = update.effective_chat.id
        engine = self.game_manager.get_engine(chat_id)

        if len(engine.players) < 2:
            await update.message.reply_text("Add at least 2 players before drawing!")
            return

        if not context.args:
            await self.game_manager.update_roster_message(chat_id, context)
            return

        mode = context.args[0].lower()
        if mode not in DRAW_MODE_ALIASES:
            await update.message.reply_text("Usage: /draw instant|wheel")
            return

        await self.start_draw(chat_id, mode, context)

    async def handle_draw_choice(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE
    ):
        query = update.callback_query
        chat_id = query.message.chat_id
        engine = self.game_manager.get_engine(chat_id)

        mode = query.data.split("_")[1]  # 'instant' or 'wheel'
        if len(engine.players) < 2:
            await query.answer("Add at least 2 players first!")
            return

        await query.answer()
        await self.start_draw(chat_id, mode, context)

    async def start_draw(self, chat_id, mode, context: ContextTypes.DEFAULT_TYPE):
        engine = self.game_manager.get_engine(chat_id)
        if not engine.draw(mode):
            return

        if DRAW_MODE_ALIASES[mode] == DRAW_INSTANT:
            await self.process_events(chat_id, context)
            return

        self.last_board_edit.pop(chat_id, None)
        await self.game_manager.replace_message(
            chat_id,
            context,
            "board",
            "🎡 Spinning the wheel...",
            self.game_manager.board_keyboard(engine),
        )
        await self.process_events(chat_id, context)
        self.ensure_ticking(chat_id, context)

    async def handle_pause(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        query = update.callback_query
        chat_id = query.message.chat_id
        engine = self.game_manager.get_engine(chat_id)

        if not engine.is_drafting:
            await query.answer("No draft in progress!")
            return

        paused = engine.toggle_pause()
        await query.answer("Draft paused" if paused else "Draft resumed")
        await self.game_manager.update_board_message(chat_id, context)

    async def pause(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        chat_id = update.effective_chat.id
        engine = self.game_manager.get_engine(chat_id)
        if not engine.pause():
            await update.message.reply_text("Nothing to pause right now.")
            return
        await self.game_manager.update_board_message(chat_id, context)

    async def resume(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        chat_id = update.effective_chat.id
        engine = self.game_manager.get_engine(chat_id)
        if not engine.resume():
            await update.message.reply_text("The draft isn't paused.")
            return
        await self.game_manager.update_board_message(chat_id, context)

    async def show_teams(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Command handler to show current teams"""
        chat_id = update.effective_chat.id
        engine = self.game_manager.get_engine(chat_id)

        if not engine.is_drawn:
            await update.message.reply_text("No teams drawn yet!")
            return

        await self.game_manager.update_teams_message(chat_id, context)

    async def copy_teams(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        chat_id = update.effective_chat.id
        engine = self.game_manager.get_engine(chat_id)

        if not engine.is_drawn:
            await update.message.reply_text("No teams drawn yet!")
            return

        await update.message.reply_text(
            format_discord(engine.team1, engine.team2, engine.attacking_team)
        )

    @admin_only
    async def reset(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        chat_id = update.effective_chat.id
        engine = self.game_manager.get_engine(chat_id)
        engine.reset()
        self.game_manager.drain_events(chat_id)
        await update.effective_message.reply_text(
            "Draft reset. The roster is kept, use /draw to start again."
        )

    def ensure_ticking(self, chat_id, context: ContextTypes.DEFAULT_TYPE) -> None:
        """(Re)start the repeating job that drives the engine for this chat"""
        engine = self.game_manager.get_engine(chat_id)
        name = f"draft-tick-{chat_id}"
        for job in context.job_queue.get_jobs_by_name(name):
            job.schedule_removal()

        context.job_queue.run_repeating(
            self.tick,
            interval=engine.config.tick_interval_ms / 1000,
            first=0,
            chat_id=chat_id,
            name=name,
            data=engine.generation,
        )

    async def tick(self, context: ContextTypes.DEFAULT_TYPE) -> None:
        job = context.job
        chat_id = job.chat_id
        engine = self.game_manager.engines.get(chat_id)

        # A job left over from a cancelled draft must not touch the new one
        if engine is None or job.data != engine.generation or not engine.needs_ticks:
            job.schedule_removal()
            return

        engine.tick(generation=job.data)
        await self.process_events(chat_id, context)

    async def process_events(self, chat_id, context: ContextTypes.DEFAULT_TYPE):
        """Render everything the engine emitted since the last call"""
        events = self.game_manager.drain_events(chat_id)
        if not events:
            return

        board_dirty = False
        highlighted = None
        side_dirty = False
        side_new = False
        teams_dirty = False

        for event, payload in events:
            if event == "pick_progress":
                highlighted = payload["highlighted"]
                board_dirty = board_dirty or self._board_due(chat_id, highlighted)
            elif event in ("pick_started", "pick_resolved"):
                board_dirty = True
            elif event == "teams_ready":
                teams_dirty = True
            elif event == "draft_complete":
                await context.bot.send_message(chat_id=chat_id, text="🎉 Teams are set!")
            elif event == "draft_cancelled":
                await context.bot.send_message(
                    chat_id=chat_id, text=f"Draft cancelled ({payload['reason']})."
                )
            elif event in SIDE_EVENTS:
                side_dirty = True
                side_new = side_new or event == "side_decision_started"
                if event == "side_complete":
                    teams_dirty = True

        engine = self.game_manager.get_engine(chat_id)
        if board_dirty and engine.sequencer is not None:
            self.last_board_edit[chat_id] = (time.monotonic(), highlighted)
            await self.game_manager.update_board_message(chat_id, context, highlighted)
        if teams_dirty:
            await self.game_manager.update_teams_message(chat_id, context)
        if side_dirty:
            await self.game_manager.update_side_message(
                chat_id, context, force_new=side_new
            )

    def _board_due(self, chat_id, highlighted) -> bool:
        last = self.last_board_edit.get(chat_id)
        if last is None:
            return True
        last_time, last_highlighted = last
        return (
            highlighted != last_highlighted
            and time.monotonic() - last_time >= BOARD_EDIT_INTERVAL
        )
