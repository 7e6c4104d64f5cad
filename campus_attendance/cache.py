import asyncio
import inspect
from typing import Protocol

import httpx
from redis.asyncio import Redis

from campus_attendance.config import settings
from campus_attendance.utils.logging import get_logger

logger = get_logger(__name__)


class CacheClient(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def setex(self, key: str, ttl_seconds: int, value: str) -> None: ...

    async def close(self) -> None: ...


class NullCache:
    """Cache that remembers nothing; every lookup falls through to the database."""

    async def get(self, key: str) -> str | None:
        return None

    async def setex(self, key: str, ttl_seconds: int, value: str) -> None:
        return None

    async def close(self) -> None:
        return None


class RedisTcpCache:
    def __init__(self, client: Redis):
        self.client = client

    async def get(self, key: str) -> str | None:
        return await self.client.get(key)

    async def setex(self, key: str, ttl_seconds: int, value: str) -> None:
        await self.client.setex(key, ttl_seconds, value)

    async def close(self) -> None:
        close_result = self.client.aclose()
        if inspect.isawaitable(close_result):
            await close_result


class UpstashRestCache:
    def __init__(self, rest_url: str, token: str, transport: httpx.AsyncBaseTransport | None = None):
        self.client = httpx.AsyncClient(
            base_url=rest_url.rstrip("/"),
            headers={"Authorization": f"Bearer {token}"},
            timeout=settings.STORAGE_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def _run(self, *command: str) -> object | None:
        response = await self.client.post("/", json=list(command))
        response.raise_for_status()
        payload = response.json()
        if isinstance(payload, dict):
            if payload.get("error"):
                raise RuntimeError(str(payload["error"]))
            return payload.get("result")
        return None

    async def ping(self) -> None:
        result = await self._run("PING")
        if str(result).upper() != "PONG":
            raise RuntimeError("Upstash REST ping failed")

    async def get(self, key: str) -> str | None:
        result = await self._run("GET", key)
        if result is None:
            return None
        return str(result)

    async def setex(self, key: str, ttl_seconds: int, value: str) -> None:
        await self._run("SETEX", key, str(ttl_seconds), value)

    async def close(self) -> None:
        await self.client.aclose()


_cache_client: CacheClient | None = None
_cache_lock = asyncio.Lock()


async def _build_redis_cache() -> RedisTcpCache:
    redis = Redis.from_url(
        settings.REDIS_URL,
        decode_responses=True,
        socket_timeout=settings.STORAGE_TIMEOUT_SECONDS,
    )
    try:
        ping_result = redis.ping()
        if inspect.isawaitable(ping_result):
            await ping_result
        return RedisTcpCache(redis)
    except Exception:
        await redis.aclose()
        raise


async def _build_cache_client() -> CacheClient:
    backend = settings.CACHE_BACKEND.strip().lower()

    if backend == "upstash_rest":
        if not (settings.UPSTASH_REDIS_REST_URL and settings.UPSTASH_REDIS_REST_TOKEN):
            logger.warning("Upstash REST selected but credentials are missing; cache disabled.")
            return NullCache()
        upstash_cache = UpstashRestCache(
            settings.UPSTASH_REDIS_REST_URL, settings.UPSTASH_REDIS_REST_TOKEN
        )
        try:
            await upstash_cache.ping()
        except Exception as error:
            await upstash_cache.close()
            logger.warning("Upstash REST unavailable, cache disabled: %s", error)
            return NullCache()
        logger.info("Cache backend: Upstash REST")
        return upstash_cache

    if backend == "redis":
        try:
            cache = await _build_redis_cache()
        except Exception as error:
            logger.warning("Redis unavailable, cache disabled: %s", error)
            return NullCache()
        logger.info("Cache backend: Redis TCP")
        return cache

    if backend != "none":
        logger.warning("Unsupported CACHE_BACKEND %r; cache disabled.", backend)
    return NullCache()


async def init_cache() -> None:
    await get_cache_client()


async def shutdown_cache() -> None:
    global _cache_client
    async with _cache_lock:
        if _cache_client is not None:
            await _cache_client.close()
            _cache_client = None


async def get_cache_client() -> CacheClient:
    global _cache_client
    if _cache_client is not None:
        return _cache_client

    async with _cache_lock:
        if _cache_client is None:
            _cache_client = await _build_cache_client()
        return _cache_client


async def get_cache():
    cache = await get_cache_client()
    yield cache
