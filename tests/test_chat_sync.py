import pytest

from core.exceptions import AuthorizationError
from models.swipe import LIKE
from services.chat_sync import ChatSync
from services.match_engine import MatchEngine


@pytest.fixture
async def squad(session_factory, players):
    async with session_factory() as session:
        engine = MatchEngine(session)
        await engine.record_swipe(4, 2, LIKE)
        await engine.record_swipe(2, 4, LIKE)
    return "2:4"


async def test_poll_advances_cursor(db, squad):
    chat = ChatSync(db)
    await chat.send(4, 2, "hi")
    await chat.send(2, 4, "hello")

    first = await chat.poll(squad, 0)
    assert [m.body for m in first.messages] == ["hi", "hello"]
    assert first.cursor == 2

    await chat.send(4, 2, "queue?")
    second = await chat.poll(squad, first.cursor)
    assert [m.body for m in second.messages] == ["queue?"]
    assert second.cursor == 3


async def test_empty_poll_keeps_cursor(db, squad):
    result = await ChatSync(db).poll(squad, 7)

    assert result.messages == []
    assert result.cursor == 7


async def test_poll_pages_by_batch_limit(db, squad):
    chat = ChatSync(db, batch_limit=2)
    for i in range(5):
        await chat.send(2, 4, f"m{i}")

    cursor, pages = 0, []
    while True:
        result = await chat.poll(squad, cursor)
        if not result.messages:
            break
        pages.append([m.sequence for m in result.messages])
        cursor = result.cursor

    assert pages == [[1, 2], [3, 4], [5]]


async def test_poll_between_infers_conversation(db, squad):
    chat = ChatSync(db)
    await chat.send_to_conversation("4:2", 4, "gg")

    result = await chat.poll_between(2, 4, 0)

    assert result.conversation_key == "2:4"
    assert [m.sender_id for m in result.messages] == [4]


async def test_viewer_must_belong_to_conversation(db, squad):
    with pytest.raises(AuthorizationError):
        await ChatSync(db).poll(squad, 0, viewer_id=1)


async def test_unmatched_pair_cannot_chat(db, squad):
    chat = ChatSync(db)

    with pytest.raises(AuthorizationError):
        await chat.send(1, 3, "hi")
    with pytest.raises(AuthorizationError):
        await chat.poll_between(1, 3, 0)
