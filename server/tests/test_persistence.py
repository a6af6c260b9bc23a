import asyncio

from eduhub.schemas import PlatformConfig
from eduhub.services.persistence import KeyValueStore
from eduhub.storage import PlatformStore

from conftest import MemoryKV, make_course, make_user


def test_saved_value_loads_back_verbatim():
    kv = KeyValueStore()

    async def scenario():
        assert await kv.get("users") is None
        assert await kv.save("users", [{"id": "u1", "tags": ["a", "b"]}]) is True
        assert await kv.save("users", [{"id": "u2"}]) is True
        return await kv.get("users")

    assert asyncio.run(scenario()) == [{"id": "u2"}]


def test_broken_backend_degrades_to_absent():
    def broken_session():
        raise RuntimeError("disk on fire")

    kv = KeyValueStore(session_factory=broken_session)
    kv._ready = True

    assert asyncio.run(kv.get("courses")) is None
    assert asyncio.run(kv.save("courses", [])) is False


def test_store_round_trip_through_kv():
    kv = MemoryKV()
    first = PlatformStore(kv)

    async def scenario():
        await first.replace("users", [make_user("u1", unlocked_courses=["c1"])])
        await first.replace("courses", [make_course("c1", lecture_ids=("l1",), expiry_date="2030-01-01T00:00:00Z")])
        await first.replace("config", PlatformConfig(teacher_name="Ms. Hoda"))

        second = PlatformStore(kv)
        await second.load()
        return second

    second = asyncio.run(scenario())
    assert second.users == first.users
    assert second.courses == first.courses
    assert second.config.teacher_name == "Ms. Hoda"
    assert set(kv.data) == {"users", "courses", "config"}


def test_store_keeps_working_in_memory_when_saves_fail():
    store = PlatformStore(MemoryKV(fail=True))

    async def scenario():
        await store.load()
        saved = await store.replace("users", [make_user("u1")])
        return saved

    assert asyncio.run(scenario()) is False
    assert [u.id for u in store.users] == ["u1"]


def test_unreadable_collection_is_ignored():
    kv = MemoryKV()
    kv.data["users"] = [{"not": "a user"}]
    kv.data["activationCodes"] = [{"code": "X1", "course_id": "c1"}]
    store = PlatformStore(kv)

    asyncio.run(store.load())
    assert store.users == []
    assert [c.code for c in store.activation_codes] == ["X1"]
