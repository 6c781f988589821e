import logging

from telegram import InlineKeyboardButton, InlineKeyboardMarkup
from telegram.error import TelegramError
from telegram.ext import ContextTypes

from database.preferences import PreferencesDBManager
from models.draft import TEAM_1, TEAM_2, DraftConfig
from models.side_decision import (
    PHASE_CHOOSE,
    PHASE_COMPLETE,
    PHASE_FLIPPING,
    PHASE_RESULT,
    SIDE_MODE_TOSS,
)
from services.draft_engine import DraftEngine

logger = logging.getLogger(__name__)

BEST_OF = {1: "BO1", 3: "BO3", 5: "BO5"}


def format_roster(engine: DraftEngine) -> str:
    players = engine.players
    text = "Players:\n\n"
    for i, player in enumerate(players, 1):
        team = engine.assignments.get(player)
        marker = f" (Team {team})" if team else ""
        text += f"{i}. {player}{marker}\n"
    if not players:
        text += "No players yet. Use /add <name> or /bulk.\n"
    text += f"\n{len(players)}/{engine.roster.max_players} players"
    return text


def format_board(engine: DraftEngine, highlighted=None) -> str:
    """Live draft board shown while the wheel is spinning"""
    sequencer = engine.sequencer
    if sequencer is None:
        return "No draft in progress."

    lines = ["🎡 DRAFT BOARD", ""]
    remaining = sequencer.remaining
    if engine.is_paused:
        lines.append("⏸ PAUSED - press Resume to continue")
    elif len(remaining) == 1:
        team = sequencer.context.assignments.get(remaining[0])
        suffix = f" goes to Team {team}" if team else ""
        lines.append(f"Last player: {remaining[0]}{suffix}")
    elif highlighted:
        lines.append(f"Selecting... {highlighted}")
    lines.append("")

    for team, members in (
        (TEAM_1, sequencer.context.team1),
        (TEAM_2, sequencer.context.team2),
    ):
        lines.append(f"TEAM {team}:")
        lines.extend(f"• {p}" for p in members)
        lines.append("")

    picked = sequencer.context.picked_count
    if picked < sequencer.total_players:
        lines.append(f"Player {picked + 1} of {sequencer.total_players}")
    return "\n".join(lines).strip()


def _side_badge(team: int, attacking_team) -> str:
    if attacking_team is None:
        return ""
    return "ATTACK 🔥" if team == attacking_team else "DEFENSE 🛡"


def format_teams(engine: DraftEngine) -> str:
    attacking = engine.attacking_team
    text = ""
    for team, members in ((TEAM_1, engine.team1), (TEAM_2, engine.team2)):
        badge = _side_badge(team, attacking)
        text += f"Team {team}{' - ' + badge if badge else ''}:\n"
        text += "\n".join(f"• {p}" for p in members)
        text += "\n\n"
    text += f"Maps: {BEST_OF.get(engine.map_count, engine.map_count)}"
    return text


def format_discord(team1, team2, attacking_team=None) -> str:
    """Teams in the format pasted into Discord"""
    sections = []
    for team, members in ((TEAM_1, team1), (TEAM_2, team2)):
        side = ""
        if attacking_team is not None:
            side = " (Attack)" if team == attacking_team else " (Defense)"
        body = "\n".join(f"• {p}" for p in members)
        sections.append(f"** Team {team} **{side}\n{body}")
    return "\n\n".join(sections)


def format_side_decision(engine: DraftEngine) -> str:
    state = engine.side_state
    if state.phase == PHASE_CHOOSE:
        return "🪙 Coin toss! Team 1, call it: heads or tails?"
    if state.phase == PHASE_FLIPPING:
        if state.side_mode == SIDE_MODE_TOSS:
            return f"🪙 Team 1 called {state.call}. Flipping..."
        return "🎲 Drawing sides..."
    if state.phase == PHASE_RESULT:
        return (
            f"🪙 It's {state.revealed_outcome}! Team {state.toss_winner} wins the toss.\n"
            f"Team {state.toss_winner}, pick your side:"
        )
    if state.phase == PHASE_COMPLETE:
        return (
            f"Team {state.attacking_team} starts on Attack 🔥\n"
            f"Team {state.defending_team} starts on Defense 🛡"
        )
    return ""


class GameManager:
    """Keeps one DraftEngine per chat and the messages that display it"""

    def __init__(self, preferences_db_manager: PreferencesDBManager, config=None):
        self.preferences_db_manager = preferences_db_manager
        self.config = config or DraftConfig()
        self.engines = {}
        self.outboxes = {}
        self.message_ids = {}

    def get_engine(self, chat_id) -> DraftEngine:
        engine = self.engines.get(chat_id)
        if engine is None:
            engine = DraftEngine(
                self.preferences_db_manager,
                key_prefix=str(chat_id),
                config=self.config,
            )
            self.outboxes[chat_id] = []
            engine.subscribe(
                lambda event, payload: self.outboxes[chat_id].append((event, payload))
            )
            self.engines[chat_id] = engine
        return engine

    def drain_events(self, chat_id) -> list:
        events = self.outboxes.get(chat_id, [])
        self.outboxes[chat_id] = []
        return events

    def remove_engine(self, chat_id):
        if chat_id in self.engines:
            self.engines[chat_id].reset()
            del self.engines[chat_id]
        self.outboxes.pop(chat_id, None)
        self.message_ids.pop(chat_id, None)

    async def replace_message(
        self, chat_id, context, slot, text, reply_markup=None
    ) -> None:
        ids = self.message_ids.setdefault(chat_id, {})
        if ids.get(slot):
            try:
                await context.bot.delete_message(chat_id=chat_id, message_id=ids[slot])
            except TelegramError as e:
                logger.debug(f"Could not delete {slot} message: {e}")

        message = await context.bot.send_message(
            chat_id=chat_id, text=text, reply_markup=reply_markup
        )
        ids[slot] = message.message_id

    async def edit_message(self, chat_id, context, slot, text, reply_markup=None):
        message_id = self.message_ids.get(chat_id, {}).get(slot)
        if not message_id:
            await self.replace_message(chat_id, context, slot, text, reply_markup)
            return
        try:
            await context.bot.edit_message_text(
                text=text,
                chat_id=chat_id,
                message_id=message_id,
                reply_markup=reply_markup,
            )
        except TelegramError as e:
            # "message is not modified" and rate limits end up here
            logger.debug(f"Could not edit {slot} message: {e}")

    async def update_roster_message(
        self, chat_id: int, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        engine = self.get_engine(chat_id)

        reply_markup = None
        if len(engine.players) >= 2 and not engine.is_drafting:
            keyboard = [
                [
                    InlineKeyboardButton("Instant Draw ⚡", callback_data="draw_instant"),
                    InlineKeyboardButton("Wheel Spin 🎡", callback_data="draw_wheel"),
                ]
            ]
            reply_markup = InlineKeyboardMarkup(keyboard)

        await self.replace_message(
            chat_id, context, "roster", format_roster(engine), reply_markup
        )

    def board_keyboard(self, engine: DraftEngine):
        if not engine.is_drafting or len(engine.sequencer.remaining) < 2:
            return None
        label = "Resume Draft ▶️" if engine.is_paused else "Pause ⏸"
        return InlineKeyboardMarkup(
            [[InlineKeyboardButton(label, callback_data="pause")]]
        )

    async def update_board_message(
        self, chat_id: int, context: ContextTypes.DEFAULT_TYPE, highlighted=None
    ) -> None:
        engine = self.get_engine(chat_id)
        await self.edit_message(
            chat_id,
            context,
            "board",
            format_board(engine, highlighted),
            self.board_keyboard(engine),
        )

    async def update_teams_message(
        self, chat_id: int, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        engine = self.get_engine(chat_id)
        if not engine.is_drawn:
            return

        reply_markup = None
        if not engine.side_state.is_active:
            label = "Redraw Side 🪙" if engine.attacking_team else "Coin Toss 🪙"
            reply_markup = InlineKeyboardMarkup(
                [[InlineKeyboardButton(label, callback_data="toss_start")]]
            )

        await self.replace_message(
            chat_id, context, "teams", format_teams(engine), reply_markup
        )

    async def update_side_message(
        self, chat_id: int, context: ContextTypes.DEFAULT_TYPE, force_new=False
    ) -> None:
        engine = self.get_engine(chat_id)
        state = engine.side_state

        reply_markup = None
        if state.phase == PHASE_CHOOSE and state.side_mode == SIDE_MODE_TOSS:
            reply_markup = InlineKeyboardMarkup(
                [
                    [
                        InlineKeyboardButton("Heads", callback_data="toss_heads"),
                        InlineKeyboardButton("Tails", callback_data="toss_tails"),
                    ]
                ]
            )
        elif state.phase == PHASE_RESULT and state.side_mode == SIDE_MODE_TOSS:
            reply_markup = InlineKeyboardMarkup(
                [
                    [
                        InlineKeyboardButton("Attack 🔥", callback_data="side_attack"),
                        InlineKeyboardButton("Defense 🛡", callback_data="side_defense"),
                    ]
                ]
            )

        text = format_side_decision(engine)
        if force_new:
            await self.replace_message(chat_id, context, "side", text, reply_markup)
        else:
            await self.edit_message(chat_id, context, "side", text, reply_markup)
