"""
Valkey (Redis-compatible) client used as the durable key-value store.

Simple wrapper around redis-py. Every key is namespaced so several app
instances can share one server. String lists are stored as native Valkey
lists. Fail-fast: raises on connection failure, never returns fallback values.
"""

import logging

import redis

logger = logging.getLogger(__name__)


class ValkeyClient:
    """
    Redis-compatible client for Valkey.

    Usage:
        client = ValkeyClient("redis://localhost:6379/0", namespace="invoice_app:")
        client.set("company_settings", "{...}")
        value = client.get("company_settings")  # Returns None if missing
        client.set_list("invoices", ["{...}", "{...}"])
    """

    def __init__(self, url: str, namespace: str = ""):
        """
        Initialize Valkey connection.

        Args:
            url: Redis-compatible connection URL (e.g., redis://localhost:6379/0)
            namespace: Prefix applied to every key

        Raises:
            redis.ConnectionError: If connection fails
        """
        self._client = redis.from_url(url, decode_responses=True)
        self._namespace = namespace
        # Verify connectivity immediately (fail-fast)
        self._client.ping()
        logger.info("ValkeyClient connected")

    def _key(self, key: str) -> str:
        return f"{self._namespace}{key}"

    def ping(self) -> bool:
        """
        Health check.

        Returns True if Valkey responds.
        Raises redis.ConnectionError if unreachable.
        """
        self._client.ping()
        return True

    def get(self, key: str) -> str | None:
        """
        Get value by key.

        Returns None if key doesn't exist (not an error).
        Raises on connection failure.
        """
        return self._client.get(self._key(key))

    def set(self, key: str, value: str) -> None:
        """Set key to value."""
        self._client.set(self._key(key), value)

    def delete(self, key: str) -> bool:
        """
        Delete key.

        Returns True if key existed and was deleted, False if key didn't exist.
        """
        return self._client.delete(self._key(key)) > 0

    def exists(self, key: str) -> bool:
        """Check if key exists."""
        return self._client.exists(self._key(key)) > 0

    def get_list(self, key: str) -> list[str] | None:
        """
        Get a string list.

        Returns None if key doesn't exist.
        """
        name = self._key(key)
        if not self._client.exists(name):
            return None
        return self._client.lrange(name, 0, -1)

    def set_list(self, key: str, values: list[str]) -> None:
        """
        Replace a string list wholesale.

        Delete and push run in one MULTI/EXEC so readers never see a
        half-written list. An empty list leaves the key absent.
        """
        name = self._key(key)
        pipe = self._client.pipeline(transaction=True)
        pipe.delete(name)
        if values:
            pipe.rpush(name, *values)
        pipe.execute()

    def close(self) -> None:
        """Close the connection."""
        self._client.close()
        logger.info("ValkeyClient closed")
