"""
Transport JSON/HTTP partagé par les sources réseau.

Chaque source possède son propre client (session aiohttp, en-têtes,
délai) ; le client convertit toute erreur réseau en ProviderError.
"""

import asyncio
import aiohttp
from typing import Optional, Dict, Any
import structlog

from .interfaces import ProviderError, ProviderRateLimitError, ProviderTimeoutError

logger = structlog.get_logger(__name__)


class JsonHttpClient:
    """Client HTTP asynchrone retournant des réponses JSON décodées."""

    def __init__(self,
                 source: str,
                 timeout: float = 10,
                 user_agent: str = "CanadianProductLookup/1.0",
                 headers: Optional[Dict[str, str]] = None):
        self.source = source
        self.timeout = timeout
        self.user_agent = user_agent
        self.headers = headers or {}

        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Obtient ou crée une session HTTP."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            headers = {
                "User-Agent": self.user_agent,
                "Accept": "application/json",
                **self.headers
            }
            self._session = aiohttp.ClientSession(
                timeout=timeout,
                headers=headers
            )
        return self._session

    async def close(self):
        """Ferme la session HTTP."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def get_json(self,
                       url: str,
                       barcode: str = "",
                       params: Optional[Dict[str, Any]] = None,
                       headers: Optional[Dict[str, str]] = None) -> Optional[Any]:
        """
        GET JSON.

        Returns:
            Corps JSON décodé, ou None si la ressource n'existe pas (404)

        Raises:
            ProviderRateLimitError: HTTP 429
            ProviderTimeoutError: Délai dépassé
            ProviderError: Autre statut non 2xx, erreur réseau ou JSON invalide
        """
        try:
            session = await self._get_session()

            logger.debug("Requesting source", source=self.source, url=url, barcode=barcode)

            async with session.get(url, params=params, headers=headers) as response:
                if response.status == 404:
                    return None

                if response.status == 429:
                    raise ProviderRateLimitError(
                        "Rate limit exceeded",
                        source=self.source,
                        barcode=barcode
                    )

                if response.status < 200 or response.status >= 300:
                    raise ProviderError(
                        f"HTTP {response.status}: {response.reason}",
                        source=self.source,
                        barcode=barcode
                    )

                return await response.json(content_type=None)

        except aiohttp.ClientError as e:
            raise ProviderError(
                f"Network error: {str(e)}",
                source=self.source,
                barcode=barcode,
                original_error=e
            )
        except asyncio.TimeoutError as e:
            raise ProviderTimeoutError(
                "Request timeout",
                source=self.source,
                barcode=barcode,
                original_error=e
            )
        except ValueError as e:
            raise ProviderError(
                f"Malformed JSON response: {str(e)}",
                source=self.source,
                barcode=barcode,
                original_error=e
            )
