import pytest

from quote_board.bootstrap import bootstrap


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def db_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'quotes.db'}"


@pytest.fixture
async def board(db_url):
    """Inline-mode board on a fresh SQLite file."""
    board = await bootstrap(db_url, create_schema=True)
    yield board
    await board.close()


@pytest.fixture
async def company(board):
    return await board.store.create_company("Kpop Corp")


@pytest.fixture
def subscription(board):
    sub = board.hub.subscribe("quotes")
    yield sub
    sub.close()


@pytest.fixture
def drain():
    """Return everything currently queued on a subscription."""

    def _drain(subscription):
        messages = []
        while subscription.pending:
            messages.append(subscription.get_nowait())
        return messages

    return _drain
