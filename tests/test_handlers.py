from itertools import count
from unittest.mock import AsyncMock, MagicMock

import pytest

from handlers.draft_handlers import DraftHandlers
from handlers.roster_handlers import RosterHandlers, _bulk_text
from handlers.toss_handlers import TossHandlers
from services.game_manager import GameManager

CHAT_ID = 1234


@pytest.fixture
def context():
    ids = count(100)
    context = MagicMock()
    context.args = []
    context.bot = AsyncMock()
    context.bot.send_message.side_effect = lambda **kwargs: MagicMock(
        message_id=next(ids)
    )
    context.job_queue = MagicMock()
    context.job_queue.get_jobs_by_name.return_value = []
    return context


@pytest.fixture
def update():
    update = MagicMock()
    update.effective_chat.id = CHAT_ID
    update.effective_user.id = 1
    update.callback_query = None
    update.message.reply_text = AsyncMock()
    update.effective_message.reply_text = AsyncMock()
    return update


def callback_update(data):
    update = MagicMock()
    update.effective_user.id = 1
    update.callback_query.data = data
    update.callback_query.message.chat_id = CHAT_ID
    update.callback_query.answer = AsyncMock()
    return update


@pytest.fixture
def handlers(store):
    game_manager = GameManager(store)
    draft_handlers = DraftHandlers(game_manager)
    return (
        game_manager,
        draft_handlers,
        RosterHandlers(game_manager, draft_handlers),
        TossHandlers(game_manager, draft_handlers),
    )


def sent_texts(context):
    return [call.kwargs["text"] for call in context.bot.send_message.call_args_list]


def test_bulk_text_takes_names_after_command():
    assert _bulk_text("/bulk Ana\nBo\nCy") == "Ana\nBo\nCy"
    assert _bulk_text("/bulk\nAna") == "Ana"
    assert _bulk_text("/bulk") == ""


@pytest.mark.asyncio
async def test_add_player_saves_and_posts_roster(handlers, update, context, store):
    game_manager, _, roster_handlers, _ = handlers
    context.args = ["Alice", "Smith"]

    await roster_handlers.add_player(update, context)

    assert store.data[f"{CHAT_ID}:players"] == ["Alice Smith"]
    assert "1. Alice Smith" in sent_texts(context)[-1]
    assert game_manager.message_ids[CHAT_ID]["roster"] == 100


@pytest.mark.asyncio
async def test_add_duplicate_player_is_refused(handlers, update, context, store):
    _, _, roster_handlers, _ = handlers
    store.data[f"{CHAT_ID}:players"] = ["Alice"]
    context.args = ["Alice"]

    await roster_handlers.add_player(update, context)

    update.message.reply_text.assert_awaited_once()
    assert "already exists" in update.message.reply_text.call_args.args[0]
    context.bot.send_message.assert_not_called()


@pytest.mark.asyncio
async def test_roster_message_is_replaced(handlers, update, context):
    _, _, roster_handlers, _ = handlers

    context.args = ["A"]
    await roster_handlers.add_player(update, context)
    context.args = ["B"]
    await roster_handlers.add_player(update, context)

    context.bot.delete_message.assert_awaited_once_with(
        chat_id=CHAT_ID, message_id=100
    )


@pytest.mark.asyncio
async def test_instant_draw_posts_teams(handlers, update, context, store):
    _, draft_handlers, _, _ = handlers
    store.data[f"{CHAT_ID}:players"] = ["A", "B", "C", "D"]
    context.args = ["instant"]

    await draft_handlers.draw(update, context)

    texts = sent_texts(context)
    assert "🎉 Teams are set!" in texts
    assert any(text.startswith("Team 1:") for text in texts)
    context.job_queue.run_repeating.assert_not_called()


@pytest.mark.asyncio
async def test_draw_needs_two_players(handlers, update, context, store):
    _, draft_handlers, _, _ = handlers
    store.data[f"{CHAT_ID}:players"] = ["A"]
    context.args = ["instant"]

    await draft_handlers.draw(update, context)

    update.message.reply_text.assert_awaited_once_with(
        "Add at least 2 players before drawing!"
    )


@pytest.mark.asyncio
async def test_wheel_draw_starts_tick_job(handlers, context, store):
    game_manager, draft_handlers, _, _ = handlers
    store.data[f"{CHAT_ID}:players"] = ["A", "B", "C"]

    await draft_handlers.handle_draw_choice(callback_update("draw_wheel"), context)

    engine = game_manager.get_engine(CHAT_ID)
    assert engine.is_drafting
    context.job_queue.run_repeating.assert_called_once()
    kwargs = context.job_queue.run_repeating.call_args.kwargs
    assert kwargs["name"] == f"draft-tick-{CHAT_ID}"
    assert kwargs["data"] == engine.generation
    assert kwargs["interval"] == pytest.approx(0.05)


@pytest.mark.asyncio
async def test_stale_tick_job_removes_itself(handlers, context, store):
    game_manager, draft_handlers, _, _ = handlers
    store.data[f"{CHAT_ID}:players"] = ["A", "B", "C"]
    engine = game_manager.get_engine(CHAT_ID)
    engine.draw("wheel")
    context.job = MagicMock(chat_id=CHAT_ID, data=engine.generation - 1)

    await draft_handlers.tick(context)

    context.job.schedule_removal.assert_called_once()
    assert engine.assignments == {}


@pytest.mark.asyncio
async def test_removing_player_mid_draft_reports_cancel(handlers, update, context, store):
    game_manager, draft_handlers, roster_handlers, _ = handlers
    store.data[f"{CHAT_ID}:players"] = ["A", "B", "C"]
    await draft_handlers.start_draw(CHAT_ID, "wheel", context)
    context.args = ["B"]

    await roster_handlers.remove_player(update, context)

    assert "Draft cancelled (roster changed)." in sent_texts(context)
    assert not game_manager.get_engine(CHAT_ID).is_drafting


@pytest.mark.asyncio
async def test_pause_button_toggles_draft(handlers, context, store):
    game_manager, draft_handlers, _, _ = handlers
    store.data[f"{CHAT_ID}:players"] = ["A", "B", "C"]
    await draft_handlers.start_draw(CHAT_ID, "wheel", context)

    query_update = callback_update("pause")
    await draft_handlers.handle_pause(query_update, context)

    query_update.callback_query.answer.assert_awaited_with("Draft paused")
    assert game_manager.get_engine(CHAT_ID).is_paused


@pytest.mark.asyncio
async def test_copy_teams_replies_with_discord_text(handlers, update, context, store):
    game_manager, draft_handlers, _, _ = handlers
    store.data[f"{CHAT_ID}:players"] = ["A", "B"]
    game_manager.get_engine(CHAT_ID).draw("instant")

    await draft_handlers.copy_teams(update, context)

    text = update.message.reply_text.call_args.args[0]
    assert text.startswith("** Team 1 **")


@pytest.mark.asyncio
async def test_reset_is_admin_only(handlers, update, context, monkeypatch):
    _, draft_handlers, _, _ = handlers
    monkeypatch.setenv("ADMIN_IDS", "42")

    await draft_handlers.reset(update, context)

    update.effective_message.reply_text.assert_awaited_once_with(
        "This command is only available to admins."
    )


@pytest.mark.asyncio
async def test_side_command_requires_teams(handlers, update, context):
    _, _, _, toss_handlers = handlers

    await toss_handlers.start_side(update, context)

    update.message.reply_text.assert_awaited_once_with("Draw the teams first!")


@pytest.mark.asyncio
async def test_toss_flow_through_buttons(handlers, update, context, store):
    game_manager, _, _, toss_handlers = handlers
    store.data[f"{CHAT_ID}:players"] = ["A", "B"]
    engine = game_manager.get_engine(CHAT_ID)
    engine.draw("instant")
    game_manager.drain_events(CHAT_ID)

    await toss_handlers.handle_toss(callback_update("toss_start"), context)
    assert engine.side_state.phase == "CHOOSE"
    assert "heads or tails" in sent_texts(context)[-1]

    await toss_handlers.handle_toss(callback_update("toss_heads"), context)
    assert engine.side_state.phase == "FLIPPING"
    context.job_queue.run_repeating.assert_called_once()

    engine.tick(now=engine.side_state.reveal_at)
    winner = engine.side_state.toss_winner
    side_update = callback_update("side_attack")
    await toss_handlers.handle_side(side_update, context)

    side_update.callback_query.answer.assert_awaited_once_with(
        f"Team {winner} chose attack!"
    )
    assert engine.attacking_team == winner
