import pytest

from closet.core.exceptions import ResourceNotFoundException
from closet.models.user import GeneratorMode
from closet.services.user import UserService


async def test_ensure_user_exists_creates_then_reuses(db):
    service = UserService()

    created = await service.ensure_user_exists(db, "user_42", "carol@example.com", full_name="Carol")
    again = await service.ensure_user_exists(db, "user_42", "other@example.com")

    assert created is again
    assert again.email == "carol@example.com"
    assert again.outfit_generator_mode == GeneratorMode.HEURISTIC.value


async def test_outfit_mode_round_trip(db, user):
    service = UserService()

    assert await service.get_outfit_mode(db, user.id) == GeneratorMode.HEURISTIC
    await service.set_outfit_mode(db, user.id, GeneratorMode.AI)
    assert await service.get_outfit_mode(db, user.id) == GeneratorMode.AI


async def test_unknown_stored_mode_reads_as_heuristic(db, user):
    user.outfit_generator_mode = "random"
    await db.flush()

    assert await UserService().get_outfit_mode(db, user.id) == GeneratorMode.HEURISTIC


async def test_mode_of_missing_user_raises(db):
    with pytest.raises(ResourceNotFoundException):
        await UserService().set_outfit_mode(db, "ghost", GeneratorMode.AI)
