"""Behaviour every backend must share (runs once per backend in conftest.BACKENDS)."""

import pytest

from endb.util import MATH_OPERATIONS


# ━━━ API ━━━


@pytest.mark.asyncio
async def test_set_get_delete_scenario(make_db):
    db = make_db()
    assert await db.set("foo", "bar") is True
    assert await db.get("foo") == "bar"
    assert await db.delete("foo") is True
    assert await db.get("foo") is None


@pytest.mark.asyncio
async def test_get_missing_returns_none(make_db):
    db = make_db()
    assert await db.get("foo") is None


@pytest.mark.asyncio
async def test_set_overwrites(make_db):
    db = make_db()
    await db.set("foo", "old")
    await db.set("foo", "new")
    assert await db.get("foo") == "new"


@pytest.mark.asyncio
async def test_has_before_and_after_set(make_db):
    db = make_db()
    assert await db.has("foo") is False
    await db.set("foo", "bar")
    assert await db.has("foo") is True


@pytest.mark.asyncio
async def test_has_sees_falsy_values(make_db):
    db = make_db()
    await db.set("nil", None)
    await db.set("zero", 0)
    assert await db.has("nil") is True
    assert await db.has("zero") is True


@pytest.mark.asyncio
async def test_delete_true_exactly_once(make_db):
    db = make_db()
    await db.set("foo", "bar")
    assert await db.delete("foo") is True
    assert await db.delete("foo") is False
    assert await db.delete("foo") is False


@pytest.mark.asyncio
async def test_delete_missing_returns_false(make_db):
    db = make_db()
    assert await db.delete("foo") is False


@pytest.mark.asyncio
async def test_all_contains_entries(make_db):
    db = make_db()
    await db.set("foo", "bar")
    await db.set("num", 1)
    elements = await db.all()
    assert {"key": "foo", "value": "bar"} in elements
    assert {"key": "num", "value": 1} in elements
    assert len(elements) == 2


@pytest.mark.asyncio
async def test_clear_returns_none_and_empties(make_db):
    db = make_db()
    assert await db.clear() is None
    await db.set("foo", "bar")
    await db.set("baz", "qux")
    assert await db.clear() is None
    assert await db.all() == []
    assert await db.has("foo") is False


@pytest.mark.asyncio
async def test_find_returns_value(make_db):
    db = make_db()
    await db.set("foo", "bar")
    await db.set("fizz", "buzz")
    assert await db.find(lambda v: v == "bar") == "bar"


@pytest.mark.asyncio
async def test_find_missing_returns_none(make_db):
    db = make_db()
    await db.set("foo", "bar")
    assert await db.find(lambda v: v == "nope") is None


@pytest.mark.asyncio
async def test_keys_values_entries(make_db):
    db = make_db()
    await db.set("a", 1)
    await db.set("b", 2)
    assert sorted(await db.keys()) == ["a", "b"]
    assert sorted(await db.values()) == [1, 2]
    assert sorted(await db.entries()) == [("a", 1), ("b", 2)]


# ━━━ Namespaces ━━━


@pytest.mark.asyncio
async def test_namespaces_are_isolated(make_db):
    users = make_db(namespace="users")
    members = make_db(namespace="members")

    await users.set("foo", "user")
    await members.set("foo", "member")

    assert await users.get("foo") == "user"
    assert await members.get("foo") == "member"
    assert await users.all() == [{"key": "foo", "value": "user"}]


@pytest.mark.asyncio
async def test_clear_only_touches_own_namespace(make_db):
    users = make_db(namespace="users")
    members = make_db(namespace="members")

    await users.set("foo", "bar")
    await members.set("foo", "bar")
    await users.clear()

    assert await users.all() == []
    assert await members.get("foo") == "bar"


@pytest.mark.asyncio
async def test_namespace_prefix_is_literal(make_db):
    """LIKE/regex wildcards in a namespace must not match other namespaces."""
    wild = make_db(namespace="a_b")
    other = make_db(namespace="axb")

    await other.set("foo", "bar")
    assert await wild.all() == []
    await wild.clear()
    assert await other.get("foo") == "bar"


# ━━━ Values ━━━


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "value",
    [
        True,
        False,
        None,
        0,
        42,
        3.5,
        "bar",
        '"',
        "it's \"quoted\"",
        ":colon",
        {"bar": "fizz", "nested": {"list": [1, 2]}},
        ["bar"],
        b"bar",
    ],
)
async def test_value_roundtrip(make_db, value):
    db = make_db()
    await db.set("foo", value)
    assert await db.get("foo") == value


@pytest.mark.asyncio
async def test_unicode_keys_and_values(make_db):
    db = make_db()
    await db.set("clé", "välue ✓")
    assert await db.get("clé") == "välue ✓"


# ━━━ Paths ━━━


@pytest.mark.asyncio
async def test_set_with_path_builds_object(make_db):
    db = make_db()
    await db.set("foo", "bar", "fizz.buzz")
    assert await db.get("foo") == {"fizz": {"buzz": "bar"}}
    assert await db.get("foo", "fizz.buzz") == "bar"


@pytest.mark.asyncio
async def test_has_and_delete_with_path(make_db):
    db = make_db()
    await db.set("foo", "bar", "fizz.buzz")
    assert await db.has("foo", "fizz.buzz") is True
    assert await db.delete("foo", "fizz.buzz") is True
    assert await db.has("foo", "fizz.buzz") is False
    assert await db.delete("foo", "fizz.buzz") is False
    assert await db.get("foo") == {"fizz": {}}


# ━━━ Math ━━━


@pytest.mark.asyncio
async def test_math_add(make_db):
    db = make_db()
    await db.set("num", 10)
    assert await db.math("num", "add", 40) is True
    assert await db.get("num") == 50


@pytest.mark.asyncio
async def test_math_chain(make_db):
    db = make_db()
    await db.set("num", 10)
    await db.math("num", "add", 100)
    await db.math("num", "div", 5)
    await db.math("num", "subtract", 15)
    assert await db.get("num") == 7


@pytest.mark.asyncio
async def test_math_random_in_range(make_db):
    db = make_db()
    for _ in range(10):
        await db.math("num", "random", 5)
        value = await db.get("num")
        assert isinstance(value, int)
        assert 0 <= value <= 5


@pytest.mark.asyncio
async def test_math_unknown_operation(make_db):
    db = make_db()
    await db.set("num", 1)
    assert "nope" not in MATH_OPERATIONS
    with pytest.raises(ValueError):
        await db.math("num", "nope", 1)
    assert await db.get("num") == 1


@pytest.mark.asyncio
async def test_math_on_non_numeric_value(make_db):
    db = make_db()
    await db.set("word", "text")
    with pytest.raises(TypeError):
        await db.math("word", "add", 1)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "value, operation",
    [("ab", "mult"), ("ab", "exp"), ([1], "mult"), ([1], "exp")],
)
async def test_math_rejects_sequences(make_db, value, operation):
    db = make_db()
    await db.set("seq", value)
    with pytest.raises(TypeError):
        await db.math("seq", operation, 2)
    assert await db.get("seq") == value
