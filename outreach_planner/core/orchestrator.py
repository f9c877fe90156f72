"""
Outreach Pipeline Orchestrator

Resolves signals (inline or from a Linkt webhook), generates outreach text
and a landing page for each one concurrently, and stores the result.
"""

from typing import Any, Dict, List, Optional, Protocol, Union
import asyncio

from loguru import logger

from .enrichment import SignalEnrichmentClient
from .signal import (
    EnrichedSignal,
    Entity,
    Outreach,
    PipelineInput,
    PipelineResult,
    Signal,
    SignalStatus,
    StoredSignal,
    utc_now_iso,
)

NO_SIGNALS_MESSAGE = "No signal data provided or retrieved"


class OutreachTextGenerator(Protocol):
    async def generate(self, signal: Signal, entities: Optional[List[Entity]] = None) -> Outreach: ...


class LandingPageBuilder(Protocol):
    async def generate(self, signal: Signal, entities: Optional[List[Entity]] = None) -> Optional[str]: ...


class SignalWriter(Protocol):
    def save(self, stored: StoredSignal) -> None: ...


class OutreachOrchestrator:
    """
    Runs the outreach pipeline.

    Usage:
        orchestrator = build_orchestrator()
        result = await orchestrator.run({"webhook": payload})
        result = await orchestrator.run({"signal": signal})
    """

    def __init__(
        self,
        store: SignalWriter,
        enrichment: SignalEnrichmentClient,
        outreach_generator: OutreachTextGenerator,
        landing_page_generator: LandingPageBuilder,
    ):
        self.store = store
        self.enrichment = enrichment
        self.outreach_generator = outreach_generator
        self.landing_page_generator = landing_page_generator

    async def run(self, request: Union[PipelineInput, Dict[str, Any]]) -> PipelineResult:
        """
        Process an inline signal or every signal a webhook names.

        Args:
            request: PipelineInput, or a dict with "signal" (plus optional
                     "entities") or "webhook"

        Returns:
            PipelineResult summarizing successes and failures
        """
        if not isinstance(request, PipelineInput):
            request = PipelineInput.model_validate(request)

        enriched_signals = await self._resolve_signals(request)

        if not enriched_signals:
            return PipelineResult(success=False, message=NO_SIGNALS_MESSAGE)

        logger.info(f"Processing {len(enriched_signals)} signals")

        # Store failures propagate out of here
        results = await asyncio.gather(
            *(self.process_signal(enriched) for enriched in enriched_signals)
        )

        succeeded = [r for r in results if r.status == SignalStatus.GENERATED]
        failed = [r for r in results if r.status == SignalStatus.ERROR]

        logger.info(f"✓ Pipeline complete: {len(succeeded)} generated, {len(failed)} failed")

        if succeeded:
            first_id = succeeded[0].signal.id
            return PipelineResult(
                success=True,
                signal_id=first_id,
                message=f"Outreach generated for {len(succeeded)} signal(s) (first: {first_id})",
            )

        return PipelineResult(
            success=False,
            signal_id=failed[0].signal.id,
            message=f"Failed to generate outreach for {len(failed)} signal(s)",
        )

    async def _resolve_signals(self, request: PipelineInput) -> List[EnrichedSignal]:
        if request.signal is not None:
            return [
                EnrichedSignal(
                    signal=request.signal,
                    entities=request.entities,
                    linkt_signal=request.linkt_signal,
                )
            ]

        if request.webhook is not None:
            payload = request.webhook
            data = payload.get("data") if isinstance(payload, dict) else None
            logger.info(
                f"Processing Linkt webhook "
                f"(event_type={payload.get('event_type')}, "
                f"run_id={data.get('run_id') if isinstance(data, dict) else None})"
            )
            return await self.enrichment.process_signal_webhook(payload)

        return []

    async def process_signal(self, enriched: EnrichedSignal) -> StoredSignal:
        """
        Generate outreach and landing page for one signal, then store it.

        Generation failures produce an "error" record that is still stored
        and indexed. Store failures are not caught.
        """
        signal = enriched.signal
        logger.info(f"Processing signal {signal.id} ({signal.type}) for {signal.company}")

        try:
            outreach, landing_page_html = await asyncio.gather(
                self.outreach_generator.generate(signal, enriched.entities),
                self._generate_landing_page_safe(signal, enriched.entities),
            )

            stored = StoredSignal(
                signal=signal,
                entities=enriched.entities or None,
                linkt_signal=enriched.linkt_signal,
                outreach=outreach,
                landing_page_html=landing_page_html,
                generated_at=utc_now_iso(),
                status=SignalStatus.GENERATED,
            )

        except Exception as e:
            logger.error(f"✗ Failed to process signal {signal.id}: {e}")

            stored = StoredSignal(
                signal=signal,
                entities=enriched.entities or None,
                linkt_signal=enriched.linkt_signal,
                outreach=Outreach(),
                generated_at=utc_now_iso(),
                status=SignalStatus.ERROR,
                error=str(e),
            )

        # Synchronous on purpose: each save (record + index update) completes
        # without yielding, so signals in this batch never interleave index writes
        self.store.save(stored)

        if stored.status == SignalStatus.GENERATED:
            logger.info(f"✓ Signal {signal.id} processed")

        return stored

    async def _generate_landing_page_safe(
        self,
        signal: Signal,
        entities: List[Entity],
    ) -> Optional[str]:
        """Landing page failures never fail the signal"""
        try:
            return await self.landing_page_generator.generate(signal, entities)
        except Exception as e:
            logger.warning(f"Landing page generation failed for {signal.id}, continuing without it: {e}")
            return None


# Convenience function
def build_orchestrator(store=None) -> OutreachOrchestrator:
    """
    Wire the pipeline from configuration.

    Args:
        store: Optional SignalStore. If None, one is built on DATABASE_URL.

    Returns:
        OutreachOrchestrator with Linkt, OpenAI and Modal collaborators
    """
    from .. import config
    from ..clients.linkt_client import LinktClient
    from ..clients.sandbox import ModalSandboxProvider
    from ..generators.landing_page import LandingPageGenerator
    from ..generators.outreach import OutreachGenerator
    from ..storage.signal_store import SignalStore

    sandbox_provider = ModalSandboxProvider() if config.LANDING_PAGE_ENABLED else None

    return OutreachOrchestrator(
        store=store or SignalStore(),
        enrichment=SignalEnrichmentClient(LinktClient()),
        outreach_generator=OutreachGenerator(),
        landing_page_generator=LandingPageGenerator(sandbox_provider),
    )
