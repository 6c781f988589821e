from telegram import Update
from telegram.ext import ContextTypes

from models.side_decision import ATTACK, SIDE_MODE_TOSS, SIDE_MODES, SIDES


class TossHandlers:
    def __init__(self, game_manager, draft_handlers):
        self.game_manager = game_manager
        self.draft_handlers = draft_handlers

    async def start_side(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """
        Decide which team starts on attack.
        Usage: /side [toss|draw] [attack|defense]
        """
        chat_id = update.effective_chat.id
        engine = self.game_manager.get_engine(chat_id)

        args = [arg.lower() for arg in context.args or []]
        side_mode = args[0] if args else SIDE_MODE_TOSS
        draw_for = args[1] if len(args) > 1 else ATTACK
        if side_mode not in SIDE_MODES or draw_for not in SIDES:
            await update.message.reply_text("Usage: /side [toss|draw] [attack|defense]")
            return

        if not engine.is_drawn:
            await update.message.reply_text("Draw the teams first!")
            return

        if not engine.start_side_decision(side_mode=side_mode, draw_for=draw_for):
            await update.message.reply_text("A side decision is already running!")
            return

        await self._after_change(chat_id, context)

    async def handle_toss(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        query = update.callback_query
        chat_id = query.message.chat_id
        engine = self.game_manager.get_engine(chat_id)

        action = query.data.split("_")[1]  # 'start', 'heads' or 'tails'
        if action == "start":
            accepted = engine.start_side_decision()
        else:
            accepted = engine.call_toss(action)

        if not accepted:
            await query.answer("No coin toss waiting for that!")
            return

        await query.answer()
        await self._after_change(chat_id, context)

    async def handle_side(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        query = update.callback_query
        chat_id = query.message.chat_id
        engine = self.game_manager.get_engine(chat_id)

        side = query.data.split("_")[1]  # 'attack' or 'defense'
        winner = engine.side_state.toss_winner
        if winner is None or not engine.choose_side(winner, side):
            await query.answer("No side choice pending!")
            return

        await query.answer(f"Team {winner} chose {side}!")
        await self._after_change(chat_id, context)

    async def _after_change(self, chat_id, context: ContextTypes.DEFAULT_TYPE):
        await self.draft_handlers.process_events(chat_id, context)
        engine = self.game_manager.get_engine(chat_id)
        if engine.needs_ticks:
            self.draft_handlers.ensure_ticking(chat_id, context)
