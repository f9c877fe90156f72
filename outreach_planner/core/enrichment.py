"""
Signal enrichment - turns Linkt signal IDs into normalized signals.

A webhook names signals by ID only. For each ID the enrichment client
fetches the signal record, then all of its entities concurrently, and maps
the result into the pipeline's Signal shape.

Failures are contained at the narrowest scope:
- a failed entity fetch is logged and skipped
- a failed signal fetch is logged and the signal is dropped
- a webhook with no usable signals yields an empty list
"""

from typing import Any, Dict, List, Optional, Protocol

from loguru import logger
from pydantic import ValidationError

from .entity_context import resolve_company_name
from .fanout import gather_settled
from .signal import (
    DEFAULT_COMPANY_NAME,
    EnrichedSignal,
    Entity,
    LinktSignalResponse,
    LinktWebhookPayload,
    Signal,
    normalize_strength,
    utc_now_iso,
)


class SignalSource(Protocol):
    """What enrichment needs from the Linkt API"""

    async def retrieve_signal(self, signal_id: str) -> Dict[str, Any]: ...

    async def retrieve_entity(self, entity_id: str) -> Dict[str, Any]: ...


def map_linkt_signal(linkt_signal: LinktSignalResponse, entities: List[Entity]) -> Signal:
    """Map a remote signal record (plus its entities) into a normalized Signal"""
    company = resolve_company_name(entities) or DEFAULT_COMPANY_NAME

    return Signal(
        id=linkt_signal.id,
        type=linkt_signal.signal_type or "other",
        summary=linkt_signal.summary or f"Signal detected for {company}.",
        company=company,
        strength=normalize_strength(linkt_signal.strength),
        date=linkt_signal.created_at or utc_now_iso(),
        source=linkt_signal.references[0] if linkt_signal.references else None,
        details={
            "icpId": linkt_signal.icp_id,
            "entityIds": linkt_signal.entity_ids,
            "references": linkt_signal.references,
        },
    )


class SignalEnrichmentClient:
    """
    Fetches and normalizes signals from Linkt.

    Usage:
        enrichment = SignalEnrichmentClient(LinktClient())
        enriched = await enrichment.process_signal_webhook(payload)
    """

    def __init__(self, source: SignalSource):
        self.source = source

    async def fetch_signal(self, signal_id: str) -> Optional[EnrichedSignal]:
        """
        Fetch one signal with its entities.

        Returns None if the signal itself cannot be retrieved or mapped.
        """
        try:
            raw = await self.source.retrieve_signal(signal_id)
            linkt_signal = LinktSignalResponse.model_validate(raw)
            entities = await self.fetch_entities(linkt_signal.entity_ids)
            signal = map_linkt_signal(linkt_signal, entities)

            return EnrichedSignal(
                signal=signal,
                entities=entities,
                linkt_signal=linkt_signal.model_dump(mode="json"),
            )

        except Exception as e:
            logger.error(f"Failed to fetch signal {signal_id} from Linkt: {e}")
            return None

    async def fetch_entities(self, entity_ids: List[str]) -> List[Entity]:
        """Fetch entities concurrently, skipping any that fail"""
        if not entity_ids:
            return []

        async def _retrieve(entity_id: str) -> Entity:
            raw = await self.source.retrieve_entity(entity_id)
            entity = Entity.model_validate(raw)
            if entity.id is None:
                entity.id = entity_id
            return entity

        settled = await gather_settled(entity_ids, _retrieve)

        for entity_id, error in settled.failures:
            logger.warning(f"Failed to fetch entity {entity_id} from Linkt: {error}")

        return settled.values

    async def process_signal_webhook(self, payload: Dict[str, Any]) -> List[EnrichedSignal]:
        """
        Resolve every signal a webhook names.

        Signals that fail or come back empty are dropped with a warning;
        the rest are returned in the webhook's order.
        """
        try:
            webhook = LinktWebhookPayload.model_validate(payload or {})
        except ValidationError as e:
            logger.warning(f"Malformed Linkt webhook payload: {e}")
            return []

        signal_ids = webhook.signal_ids()

        if not signal_ids:
            logger.warning(
                f"Webhook contained no signal IDs "
                f"(event_type={webhook.event_type}, run_id={webhook.data.run_id})"
            )
            return []

        logger.info(f"Enriching {len(signal_ids)} signals from run {webhook.data.run_id}")

        settled = await gather_settled(signal_ids, self.fetch_signal)

        for signal_id, error in settled.failures:
            logger.warning(f"Failed to process signal ID {signal_id} from webhook: {error}")

        enriched = []
        for signal_id, result in settled.successes:
            if result is None:
                logger.warning(f"Dropping signal {signal_id}: no data retrieved")
                continue
            enriched.append(result)

        logger.info(f"✓ Enriched {len(enriched)}/{len(signal_ids)} signals")
        return enriched
