from telegram import Update
from telegram.ext import Application, CommandHandler, CallbackQueryHandler
import logging
from config import TOKEN, DRAFT_CONFIG
from database.preferences import PreferencesDBManager
from handlers.draft_handlers import DraftHandlers
from handlers.roster_handlers import RosterHandlers
from handlers.toss_handlers import TossHandlers
from services.game_manager import GameManager

logger = logging.getLogger(__name__)


def main():
    app = Application.builder().token(TOKEN).build()

    # Initialize database managers
    preferences_db_manager = PreferencesDBManager()

    # Initialize services and handlers
    game_manager = GameManager(preferences_db_manager, config=DRAFT_CONFIG)
    draft_handlers = DraftHandlers(game_manager)
    roster_handlers = RosterHandlers(game_manager, draft_handlers)
    toss_handlers = TossHandlers(game_manager, draft_handlers)

    # Roster
    app.add_handler(CommandHandler("add", roster_handlers.add_player))
    app.add_handler(CommandHandler("bulk", roster_handlers.bulk_add))
    app.add_handler(CommandHandler("remove", roster_handlers.remove_player))
    app.add_handler(CommandHandler("clear", roster_handlers.clear_roster))
    app.add_handler(CommandHandler("list", roster_handlers.list_players))
    app.add_handler(CommandHandler("maps", roster_handlers.set_map_count))

    # Draft
    app.add_handler(CommandHandler("draw", draft_handlers.draw))
    app.add_handler(CommandHandler("pause", draft_handlers.pause))
    app.add_handler(CommandHandler("resume", draft_handlers.resume))
    app.add_handler(CommandHandler("teams", draft_handlers.show_teams))
    app.add_handler(CommandHandler("copy", draft_handlers.copy_teams))
    app.add_handler(CommandHandler("reset", draft_handlers.reset))
    app.add_handler(
        CallbackQueryHandler(draft_handlers.handle_draw_choice, pattern="^draw_")
    )
    app.add_handler(CallbackQueryHandler(draft_handlers.handle_pause, pattern="^pause$"))

    # Sides
    app.add_handler(CommandHandler("side", toss_handlers.start_side))
    app.add_handler(CallbackQueryHandler(toss_handlers.handle_toss, pattern="^toss_"))
    app.add_handler(CallbackQueryHandler(toss_handlers.handle_side, pattern="^side_"))

    logger.info("Team draw bot started! Press Ctrl+C to exit.")

    # Start the bot
    app.run_polling(allowed_updates=Update.ALL_TYPES)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("Bot stopped!")
