"""Actor identity seam.

The opaque actor id comes from an external identity provider and becomes
available asynchronously. Reads are allowed before that; writes are not.
"""

import asyncio

from loguru import logger

from typing_arena.errors import IdentityNotReadyError


class ActorIdentity:
    def __init__(self, actor_id: str | None = None):
        self._actor_id: str | None = None
        self._ready = asyncio.Event()
        if actor_id:
            self.establish(actor_id)

    @property
    def actor_id(self) -> str | None:
        return self._actor_id

    @property
    def is_ready(self) -> bool:
        return self._actor_id is not None

    def establish(self, actor_id: str) -> None:
        if not actor_id:
            raise ValueError("actor_id must not be empty")
        self._actor_id = actor_id
        self._ready.set()
        logger.info(f"[IDENTITY] Actor established ({actor_id[:8]}...)")

    async def wait_ready(self, timeout: float | None = None) -> str:
        """Wait until an actor id is available.

        Raises:
            IdentityNotReadyError: If the timeout expires first
        """
        try:
            await asyncio.wait_for(self._ready.wait(), timeout=timeout)
        except TimeoutError as e:
            raise IdentityNotReadyError(f"Identity not established after {timeout}s") from e
        return self.require()

    def require(self) -> str:
        """Current actor id, or IdentityNotReadyError if none yet."""
        if self._actor_id is None:
            raise IdentityNotReadyError("Identity not established yet; scores cannot be saved")
        return self._actor_id
