import asyncio

import pytest

from typing_arena.errors import IdentityNotReadyError
from typing_arena.game.identity import ActorIdentity


def test_not_ready_until_established():
    identity = ActorIdentity()
    assert not identity.is_ready
    assert identity.actor_id is None
    with pytest.raises(IdentityNotReadyError):
        identity.require()

    identity.establish("actor-9")
    assert identity.is_ready
    assert identity.require() == "actor-9"


def test_empty_id_rejected():
    with pytest.raises(ValueError):
        ActorIdentity().establish("")


@pytest.mark.asyncio
async def test_wait_ready_resolves_when_established_later():
    identity = ActorIdentity()
    asyncio.get_running_loop().call_later(0.01, identity.establish, "actor-late")
    assert await identity.wait_ready(timeout=1.0) == "actor-late"


@pytest.mark.asyncio
async def test_wait_ready_times_out():
    with pytest.raises(IdentityNotReadyError):
        await ActorIdentity().wait_ready(timeout=0.01)
