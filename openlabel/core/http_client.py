# openlabel/core/http_client.py
"""
Process-wide HTTP client manager.
The provider SDK is handed a single httpx.AsyncClient so connections are pooled across requests.
"""

from typing import Optional

import httpx


class HttpClientManager:
    """
    Holds the AsyncClient that AIService hands to AsyncOpenAI.
    Its read timeout is PROVIDER_TIMEOUT; the lifespan closes it on shutdown.
    """
    _client: Optional[httpx.AsyncClient] = None

    @classmethod
    def get_client(cls, timeout: float = 60.0) -> httpx.AsyncClient:
        """Get or create the shared HTTP client instance."""
        if cls._client is None or cls._client.is_closed:
            limits = httpx.Limits(
                max_keepalive_connections=20,
                max_connections=40
            )
            cls._client = httpx.AsyncClient(
                http2=True,  # requires httpx[http2]
                timeout=httpx.Timeout(timeout, connect=10.0),
                limits=limits,
                headers={
                    'User-Agent': 'OpenLabel/1.0'
                }
            )
        return cls._client

    @classmethod
    async def close(cls) -> None:
        """Close the shared client. Call on app shutdown."""
        if cls._client is not None and not cls._client.is_closed:
            await cls._client.aclose()
        cls._client = None
