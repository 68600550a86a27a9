import asyncio
import re

import pytest

from quote_board.bootstrap import bootstrap
from quote_board.errors import NotFoundError, ValidationError


@pytest.mark.anyio
async def test_create_assigns_id_and_broadcasts_prepend(board, company, subscription, drain):
    quote = await board.store.create("A", company.id)

    assert quote.id == 1
    messages = drain(subscription)
    assert len(messages) == 1
    message = messages[0]
    assert message.kind == "created"
    assert message.target_id == "1"
    assert message.insertion == "prepend"
    assert 'id="quote_1"' in message.html_fragment
    assert ">A</a>" in message.html_fragment


@pytest.mark.anyio
@pytest.mark.parametrize("name", ["", "   ", None])
async def test_create_with_blank_name_fails_without_side_effects(
    board, company, subscription, drain, name
):
    with pytest.raises(ValidationError) as exc_info:
        await board.store.create(name, company.id)

    assert exc_info.value.errors == {"name": ["can't be blank"]}
    assert "Name can't be blank" in str(exc_info.value)
    assert drain(subscription) == []
    assert await board.store.list_ordered() == []


@pytest.mark.anyio
async def test_create_requires_existing_company(board, subscription, drain):
    with pytest.raises(ValidationError) as exc_info:
        await board.store.create("A", 42)

    assert exc_info.value.errors == {"company": ["must exist"]}
    assert drain(subscription) == []
    assert await board.store.list_ordered() == []


@pytest.mark.anyio
async def test_list_ordered_is_newest_first_and_idempotent(board, company):
    first = await board.store.create("first", company.id)
    second = await board.store.create("second", company.id)

    listing = await board.store.list_ordered()
    assert [q.id for q in listing] == [second.id, first.id] == [2, 1]
    again = await board.store.list_ordered()
    assert [(q.id, q.name) for q in again] == [(q.id, q.name) for q in listing]


@pytest.mark.anyio
async def test_update_broadcasts_replace(board, company, subscription, drain):
    quote = await board.store.create("A", company.id)
    drain(subscription)

    updated = await board.store.update(quote.id, {"name": "B"})

    assert updated.name == "B"
    messages = drain(subscription)
    assert len(messages) == 1
    assert messages[0].kind == "updated"
    assert messages[0].target_id == str(quote.id)
    assert messages[0].insertion == "replace"
    assert ">B</a>" in messages[0].html_fragment
    assert (await board.store.get(quote.id)).name == "B"


@pytest.mark.anyio
async def test_update_can_move_quote_to_another_company(board, company):
    other = await board.store.create_company("Other Corp")
    quote = await board.store.create("A", company.id)

    await board.store.update(quote.id, {"company_id": other.id})

    assert (await board.store.get(quote.id)).company_id == other.id


@pytest.mark.anyio
@pytest.mark.parametrize(
    "changes, errors",
    [
        ({"name": ""}, {"name": ["can't be blank"]}),
        ({"name": None}, {"name": ["can't be blank"]}),
        ({"company_id": 999}, {"company": ["must exist"]}),
        ({"id": 7}, {"id": ["is not an updatable attribute"]}),
    ],
)
async def test_invalid_update_leaves_record_untouched(
    board, company, subscription, drain, changes, errors
):
    quote = await board.store.create("A", company.id)
    drain(subscription)

    with pytest.raises(ValidationError) as exc_info:
        await board.store.update(quote.id, changes)

    assert exc_info.value.errors == errors
    assert drain(subscription) == []
    stored = await board.store.get(quote.id)
    assert (stored.name, stored.company_id) == ("A", company.id)


@pytest.mark.anyio
async def test_update_unknown_quote_raises_not_found(board, company, subscription, drain):
    with pytest.raises(NotFoundError):
        await board.store.update(99, {"name": "B"})
    assert drain(subscription) == []


@pytest.mark.anyio
async def test_delete_broadcasts_remove_and_drops_from_listing(
    board, company, subscription, drain
):
    quote = await board.store.create("A", company.id)
    keep = await board.store.create("B", company.id)
    drain(subscription)

    await board.store.delete(quote.id)

    messages = drain(subscription)
    assert len(messages) == 1
    message = messages[0]
    assert message.kind == "deleted"
    assert message.target_id == str(quote.id)
    assert message.insertion == "remove"
    assert message.html_fragment is None
    assert [q.id for q in await board.store.list_ordered()] == [keep.id]
    with pytest.raises(NotFoundError):
        await board.store.get(quote.id)


@pytest.mark.anyio
async def test_delete_twice_raises_not_found_and_broadcasts_once(
    board, company, subscription, drain
):
    quote = await board.store.create("A", company.id)
    drain(subscription)

    await board.store.delete(quote.id)
    with pytest.raises(NotFoundError):
        await board.store.delete(quote.id)

    assert [m.kind for m in drain(subscription)] == ["deleted"]


@pytest.mark.anyio
async def test_ids_of_deleted_quotes_are_not_reused(board, company):
    await board.store.create("A", company.id)
    second = await board.store.create("B", company.id)
    await board.store.delete(second.id)

    third = await board.store.create("C", company.id)

    assert third.id == 3


@pytest.mark.anyio
async def test_failing_listener_does_not_fail_the_write(board, company, subscription, drain):
    async def broken_listener(kind, snapshot):
        raise RuntimeError("boom")

    board.store.subscribe(broken_listener)

    quote = await board.store.create("A", company.id)

    assert quote.id is not None
    assert [m.kind for m in drain(subscription)] == ["created"]


@pytest.mark.anyio
async def test_listeners_receive_kind_and_committed_snapshot(board, company):
    seen = []

    async def listener(kind, snapshot):
        stored = await board.store.list_ordered()
        seen.append((kind, snapshot.id, snapshot.name, [q.id for q in stored]))

    board.store.subscribe(listener)
    quote = await board.store.create("A", company.id)
    await board.store.update(quote.id, {"name": "B"})
    await board.store.delete(quote.id)
    board.store.unsubscribe(listener)
    await board.store.create("C", company.id)

    assert seen == [
        ("created", quote.id, "A", [quote.id]),
        ("updated", quote.id, "B", [quote.id]),
        ("deleted", quote.id, "B", []),
    ]


@pytest.mark.anyio
async def test_concurrent_updates_to_one_quote_broadcast_in_commit_order(
    board, company, subscription, drain
):
    quote = await board.store.create("start", company.id)
    drain(subscription)
    committed = []

    async def slow_listener(kind, snapshot):
        # Earlier writers stall longest, so unserialized delivery would reorder.
        committed.append(snapshot.name)
        await asyncio.sleep((5 - int(snapshot.name.split("-")[1])) * 0.01)

    # Runs ahead of the broadcaster for every commit.
    board.store.unsubscribe(board.broadcaster.on_commit)
    board.store.subscribe(slow_listener)
    board.store.subscribe(board.broadcaster.on_commit)

    await asyncio.gather(
        *(board.store.update(quote.id, {"name": f"name-{i}"}) for i in range(5))
    )

    messages = drain(subscription)
    assert all(m.kind == "updated" for m in messages)
    broadcast = [re.search(r">(name-\d)</a>", m.html_fragment).group(1) for m in messages]
    assert sorted(committed) == [f"name-{i}" for i in range(5)]
    assert broadcast == committed
    final = await board.store.get(quote.id)
    assert final.name == committed[-1]


@pytest.mark.anyio
async def test_company_name_is_required(board):
    with pytest.raises(ValidationError):
        await board.store.create_company("  ")
    assert await board.store.list_companies() == []


@pytest.mark.anyio
async def test_get_company_unknown_raises_not_found(board):
    with pytest.raises(NotFoundError) as exc_info:
        await board.store.get_company(5)
    assert str(exc_info.value) == "Company with id=5 not found"


@pytest.mark.anyio
async def test_company_id_beyond_integer_range_does_not_exist(board, subscription, drain):
    with pytest.raises(ValidationError) as exc_info:
        await board.store.create("A", 2**70)

    assert exc_info.value.errors == {"company": ["must exist"]}
    assert drain(subscription) == []


@pytest.mark.anyio
@pytest.mark.parametrize("quote_id", [2**63, 2**70, -(2**70)])
async def test_quote_id_beyond_integer_range_is_not_found(board, company, quote_id):
    with pytest.raises(NotFoundError):
        await board.store.update(quote_id, {"name": "B"})
    with pytest.raises(NotFoundError):
        await board.store.delete(quote_id)
    with pytest.raises(NotFoundError):
        await board.store.get(quote_id)


@pytest.mark.anyio
async def test_writes_broadcast_when_session_kwargs_ask_for_expiry(db_url):
    board = await bootstrap(
        db_url, session_kwargs={"expire_on_commit": True}, create_schema=True
    )
    try:
        sub = board.hub.subscribe("quotes")
        company = await board.store.create_company("Kpop Corp")
        quote = await board.store.create("A", company.id)
        await board.store.update(quote.id, {"name": "B"})

        assert company.name == "Kpop Corp"
        assert [sub.get_nowait().kind for _ in range(sub.pending)] == ["created", "updated"]
    finally:
        await board.close()
