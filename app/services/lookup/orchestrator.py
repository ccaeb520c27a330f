"""
Orchestrateur de la cascade de résolution code-barres -> produit.

Les sources sont consultées dans un ordre fixe ; la première qui retourne
un produit arrête la cascade. Toute erreur ou absence d'une source fait
passer à la suivante. Le résultat d'une source autre que le cache est
écrit dans le stockage avant d'être retourné.

Architecture Pattern : Chain of Responsibility + Strategy
"""

import asyncio
import time
from typing import List, Optional, Sequence
import structlog

from .config import LookupConfig
from .interfaces import (
    FetchResult, IPersistenceGateway, ISourceProvider, LookupResult,
    ProductRecord, ProviderTimeoutError, SourceTag
)

logger = structlog.get_logger(__name__)

NOT_FOUND_REASON = "not found in any source"


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


class ProductLookupOrchestrator:
    """
    Résolution d'un code-barres à travers la cascade de sources.

    Responsabilités :
    - Ordre fixe des sources, arrêt au premier succès
    - Délai borné par appel, isolation des échecs par source
    - Écriture du produit résolu (hors cache)
    - Un événement de log par tentative et par résolution
    """

    def __init__(self,
                 providers: Sequence[ISourceProvider],
                 gateway: IPersistenceGateway,
                 config: Optional[LookupConfig] = None):
        self.providers: List[ISourceProvider] = list(providers)
        self.gateway = gateway
        self.config = config or LookupConfig()

    @property
    def active_providers(self) -> List[ISourceProvider]:
        return [p for p in self.providers if p.is_configured]

    async def _attempt(self, provider: ISourceProvider, barcode: str) -> FetchResult:
        """Appel borné d'une source ; un dépassement de délai est un échec."""
        try:
            return await asyncio.wait_for(provider.fetch(barcode), timeout=provider.timeout)
        except asyncio.TimeoutError as e:
            return FetchResult.failed(ProviderTimeoutError(
                f"No response within {provider.timeout}s",
                source=provider.source.value,
                barcode=barcode,
                original_error=e
            ))

    def _is_soft_miss(self, record: ProductRecord) -> bool:
        return not self.config.accept_placeholder_names and self.config.is_placeholder_name(record.name)

    async def _persist(self, record: ProductRecord):
        try:
            await self.gateway.upsert(record)
            logger.info(
                "Product persisted",
                barcode=record.barcode,
                source=record.source.value
            )
        except Exception as e:
            # The lookup itself succeeded; only cache warming is lost
            logger.error(
                "Failed to persist product",
                barcode=record.barcode,
                source=record.source.value,
                error=str(e),
                error_type=type(e).__name__
            )

    async def resolve(self, barcode: str) -> LookupResult:
        """
        Résout un code-barres.

        Args:
            barcode: Code-barres non vide, transmis sans validation de format

        Returns:
            LookupResult trouvé, ou non trouvé avec une raison lisible
        """
        if not barcode:
            raise ValueError("barcode must be a non-empty string")

        started = time.perf_counter()
        record: Optional[ProductRecord] = None
        winner: Optional[SourceTag] = None

        for provider in self.providers:
            if not provider.is_configured:
                logger.debug("Provider not configured, skipped", barcode=barcode, source=provider.source.value)
                continue

            attempt_started = time.perf_counter()
            outcome = await self._attempt(provider, barcode)
            latency_ms = _elapsed_ms(attempt_started)

            if outcome.error is not None:
                logger.warning(
                    "Provider attempt",
                    barcode=barcode,
                    source=provider.source.value,
                    outcome="error",
                    latency_ms=latency_ms,
                    error=str(outcome.error)
                )
                continue

            if not outcome.is_hit:
                logger.info(
                    "Provider attempt",
                    barcode=barcode,
                    source=provider.source.value,
                    outcome="miss",
                    latency_ms=latency_ms
                )
                continue

            if self._is_soft_miss(outcome.record):
                logger.info(
                    "Provider attempt",
                    barcode=barcode,
                    source=provider.source.value,
                    outcome="miss",
                    latency_ms=latency_ms,
                    placeholder_name=outcome.record.name
                )
                continue

            logger.info(
                "Provider attempt",
                barcode=barcode,
                source=provider.source.value,
                outcome="hit",
                latency_ms=latency_ms
            )
            record = outcome.record
            winner = provider.source
            break

        if record is not None and winner != SourceTag.CACHE:
            await self._persist(record)

        logger.info(
            "Lookup completed",
            barcode=barcode,
            final_source=winner.value if winner else None,
            is_canadian=record.is_canadian if record else None,
            total_latency_ms=_elapsed_ms(started)
        )

        if record is None:
            return LookupResult.not_found(NOT_FOUND_REASON)
        return LookupResult.hit(record, source=winner)

    async def close(self):
        """Ferme les connexions réseau des sources."""
        for provider in self.providers:
            try:
                await provider.close()
            except Exception as e:
                logger.warning("Failed to close provider", source=provider.source.value, error=str(e))
