"""
Live optimization status channel.

Every lifecycle transition is mirrored as JSON to ``<prefix>:<id>`` on Redis
pub/sub. Mirroring is best-effort: a failed publish is logged and dropped.
"""

from __future__ import annotations

from typing import Callable, Optional

import redis.asyncio as aioredis

from ecopilot.application.dtos.optimization_dto import EnergyStatusDTO
from ecopilot.domain.entities.optimization import OptimizationState
from ecopilot.shared import get_logger

logger = get_logger(__name__)


class RedisStatusPublisher:
    """Publish :class:`EnergyStatusDTO` messages over Redis pub/sub."""

    def __init__(
        self,
        redis_url: str,
        channel_prefix: str = "energy_status",
        socket_timeout: float = 2.0,
        client_factory: Optional[Callable[[], aioredis.Redis]] = None,
    ) -> None:
        self._redis_url = redis_url
        self._channel_prefix = channel_prefix
        self._socket_timeout = socket_timeout
        self._client_factory = client_factory

    def channel_for(self, optimization_id: str) -> str:
        return f"{self._channel_prefix}:{optimization_id}"

    def _client(self) -> aioredis.Redis:
        if self._client_factory is not None:
            return self._client_factory()
        # one client per publish: each Celery task runs its own event loop
        return aioredis.from_url(
            self._redis_url,
            socket_connect_timeout=self._socket_timeout,
            socket_timeout=self._socket_timeout,
        )

    async def publish(self, state: OptimizationState) -> None:
        message = EnergyStatusDTO.from_entity(state).model_dump_json(by_alias=True)
        channel = self.channel_for(state.id)
        client = self._client()
        try:
            receivers = await client.publish(channel, message)
            logger.debug(
                "status.published",
                channel=channel,
                status=state.status.value,
                receivers=receivers,
            )
        except Exception as exc:
            logger.warning(
                "status.publish_failed",
                optimization_id=state.id,
                status=state.status.value,
                error=str(exc),
            )
        finally:
            await client.aclose()


class NullStatusPublisher:
    """Used when no Redis URL is configured."""

    async def publish(self, state: OptimizationState) -> None:
        logger.debug(
            "status.channel_disabled",
            optimization_id=state.id,
            status=state.status.value,
        )
