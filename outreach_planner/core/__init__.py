"""Core pipeline: models, enrichment and orchestration"""

from .signal import (
    Signal,
    SignalStrength,
    Entity,
    EntityType,
    EnrichedSignal,
    Outreach,
    StoredSignal,
    SignalStatus,
    PipelineInput,
    PipelineResult,
)
from .enrichment import SignalEnrichmentClient
from .orchestrator import OutreachOrchestrator, build_orchestrator

__all__ = [
    "Signal",
    "SignalStrength",
    "Entity",
    "EntityType",
    "EnrichedSignal",
    "Outreach",
    "StoredSignal",
    "SignalStatus",
    "PipelineInput",
    "PipelineResult",
    "SignalEnrichmentClient",
    "OutreachOrchestrator",
    "build_orchestrator",
]
