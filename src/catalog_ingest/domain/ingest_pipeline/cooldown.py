"""Bounded back-off after the repository index reports an exhausted quota."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from catalog_ingest.config.ingestion import CooldownPolicy
    from catalog_ingest.domain.errors import RateLimitExceeded

log = getLogger(__name__)

type Sleeper = Callable[[float], Awaitable[object]]


class RateLimitCooldown:
    """Counts cooldowns for one run and refuses once the budget is spent.

    After ``exhausted`` flips, callers must stop issuing index calls for the
    rest of the run.
    """

    def __init__(self, policy: CooldownPolicy, *, sleep: Sleeper = asyncio.sleep) -> None:
        self._policy = policy
        self._sleep = sleep
        self.used = 0
        self.exhausted = False

    async def observe(self, exc: RateLimitExceeded) -> bool:
        """Sleep for the cooldown and return ``True`` if more calls may follow."""

        if self.exhausted:
            return False
        if self.used >= self._policy.max_cooldowns:
            self.exhausted = True
            log.warning(
                "Rate limit hit again after %s cooldown(s); stopping index calls for this run",
                self.used,
            )
            return False
        wait = self._policy.wait_for(exc.retry_after)
        self.used += 1
        log.warning(
            "Rate limit exhausted (%s); cooling down for %.1fs (%s/%s)",
            exc,
            wait,
            self.used,
            self._policy.max_cooldowns,
        )
        await self._sleep(wait)
        return True
