"""Signal, entity and outreach models - the pipeline's normalized shapes"""

from typing import Any, Dict, List, Optional
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator


class SignalStrength(str, Enum):
    """How strong a detected business event is"""
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


# Named signal types with the audience each one appeals to.
# Signal.type stays open: any other string is accepted as-is.
KNOWN_SIGNAL_TYPES: Dict[str, str] = {
    "funding": "funding rounds, investment news, and capital raises",
    "leadership_change": "executive moves, leadership transitions, and C-suite changes",
    "product_launch": "new product announcements, feature releases, and launches",
    "partnership": "strategic partnerships, alliances, and collaborations",
    "acquisition": "mergers, acquisitions, and company purchases",
    "expansion": "market expansion, new offices, and geographic growth",
    "hiring_surge": "rapid hiring, team growth, and talent acquisition",
    "layoff": "workforce changes, restructuring, and organizational shifts",
    "award": "industry recognition, awards, and achievements",
}

DEFAULT_SIGNAL_TYPE = "other"

# Company display name when nothing better is known
DEFAULT_COMPANY_NAME = "Target Account"


def normalize_strength(strength: Any) -> SignalStrength:
    """
    Map a raw strength value onto HIGH / MEDIUM / LOW.

    Matching is case-insensitive. Missing or unrecognized values become MEDIUM.
    """
    if isinstance(strength, SignalStrength):
        return strength

    if not isinstance(strength, str) or not strength:
        return SignalStrength.MEDIUM

    try:
        return SignalStrength(strength.strip().upper())
    except ValueError:
        return SignalStrength.MEDIUM


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string"""
    return datetime.now(timezone.utc).isoformat()


class Signal(BaseModel):
    """
    Normalized record of one detected business event.
    Both the webhook path and inline submissions produce this shape.
    """

    id: str = Field(..., description="Opaque, stable signal identifier")
    type: str = Field(DEFAULT_SIGNAL_TYPE, description="Signal type (e.g., 'funding')")
    summary: str = Field("", description="Free-text description of the event")
    company: str = Field(DEFAULT_COMPANY_NAME, description="Company display name")
    strength: SignalStrength = Field(SignalStrength.MEDIUM, description="Signal strength")
    date: str = Field(..., description="ISO-8601 timestamp of the event")

    source: Optional[str] = Field(None, description="Reference URL or source name")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional attributes")

    @field_validator("type", mode="before")
    @classmethod
    def _default_type(cls, value: Any) -> Any:
        if value is None or value == "":
            return DEFAULT_SIGNAL_TYPE
        return value

    @field_validator("company", mode="before")
    @classmethod
    def _default_company(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_COMPANY_NAME
        return value

    @field_validator("strength", mode="before")
    @classmethod
    def _normalize_strength(cls, value: Any) -> SignalStrength:
        return normalize_strength(value)

    class Config:
        json_schema_extra = {
            "example": {
                "id": "sig_001",
                "type": "funding",
                "summary": "Acme Corp raised a $40M Series B led by Example Ventures",
                "company": "Acme Corp",
                "strength": "HIGH",
                "date": "2026-01-28",
                "source": "https://example.com/acme-series-b",
            }
        }


class EntityType(str, Enum):
    """Kinds of entity records attached to a signal"""
    COMPANY = "company"
    PERSON = "person"
    OTHER = "other"


class Entity(BaseModel):
    """
    Company or person record used as generation context.

    Conventional data keys: name, email, title, linkedin_url, company_name,
    company_domain, industry, location/headquarters, size/employees,
    website, description.
    """

    id: Optional[str] = None
    entity_type: EntityType = EntityType.OTHER
    data: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("entity_type", mode="before")
    @classmethod
    def _coerce_entity_type(cls, value: Any) -> EntityType:
        try:
            return EntityType(value)
        except ValueError:
            return EntityType.OTHER

    @field_validator("data", mode="before")
    @classmethod
    def _default_data(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else {}


class LinktSignalResponse(BaseModel):
    """Signal record as returned by the Linkt API"""

    id: str
    entity_ids: List[str] = Field(default_factory=list)
    summary: Optional[str] = None
    signal_type: Optional[str] = None
    strength: Optional[str] = None
    created_at: Optional[str] = None
    icp_id: Optional[str] = None
    references: List[str] = Field(default_factory=list)

    class Config:
        extra = "allow"

    @field_validator("entity_ids", "references", mode="before")
    @classmethod
    def _default_list(cls, value: Any) -> Any:
        return value if value is not None else []


class EnrichedSignal(BaseModel):
    """A normalized signal plus the context fetched alongside it"""

    signal: Signal
    entities: List[Entity] = Field(default_factory=list)
    linkt_signal: Optional[Dict[str, Any]] = None


class EmailDraft(BaseModel):
    subject: str = ""
    body: str = ""


def _text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


class Outreach(BaseModel):
    """Generated outreach bundle. Every field has an empty default."""

    email: EmailDraft = Field(default_factory=EmailDraft)
    linkedin: str = ""
    twitter: str = ""
    call_points: List[str] = Field(default_factory=list, alias="callPoints")
    summary: str = ""

    class Config:
        populate_by_name = True

    @classmethod
    def from_completion(cls, payload: Dict[str, Any]) -> "Outreach":
        """
        Build an Outreach from a loosely-shaped completion JSON object.

        Missing or wrongly-typed fields become empty values so a partially
        valid response never fails validation.
        """
        email = payload.get("email")
        if not isinstance(email, dict):
            email = {}

        call_points = payload.get("callPoints")
        if isinstance(call_points, str):
            call_points = [call_points]
        elif not isinstance(call_points, list):
            call_points = []

        return cls(
            email=EmailDraft(
                subject=_text(email.get("subject")),
                body=_text(email.get("body")),
            ),
            linkedin=_text(payload.get("linkedin")),
            twitter=_text(payload.get("twitter")),
            call_points=[_text(point) for point in call_points if _text(point)],
            summary=_text(payload.get("summary")),
        )


class SignalStatus(str, Enum):
    """Outcome of one processing attempt"""
    GENERATED = "generated"
    ERROR = "error"


class StoredSignal(BaseModel):
    """
    Durable record for one signal.

    Regeneration replaces the whole record under the same key. Stored JSON
    uses camelCase keys (callPoints, landingPageHtml, generatedAt, linktSignal).
    """

    signal: Signal
    entities: Optional[List[Entity]] = None
    linkt_signal: Optional[Dict[str, Any]] = Field(None, alias="linktSignal")
    outreach: Outreach = Field(default_factory=Outreach)
    landing_page_html: Optional[str] = Field(None, alias="landingPageHtml")
    generated_at: str = Field(default_factory=utc_now_iso, alias="generatedAt")
    status: SignalStatus
    error: Optional[str] = None

    class Config:
        populate_by_name = True

    @model_validator(mode="after")
    def _error_matches_status(self) -> "StoredSignal":
        if self.status == SignalStatus.ERROR and self.error is None:
            raise ValueError("error message is required when status is 'error'")
        if self.status != SignalStatus.ERROR and self.error is not None:
            raise ValueError("error message is only allowed when status is 'error'")
        return self

    def to_record(self) -> Dict[str, Any]:
        """JSON-ready dict in the stored (camelCase, absent-omitted) form"""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class LinktWebhookResources(BaseModel):
    entities_created: List[str] = Field(default_factory=list)
    entities_updated: List[str] = Field(default_factory=list)
    signals_created: List[str] = Field(default_factory=list)

    @field_validator("entities_created", "entities_updated", "signals_created", mode="before")
    @classmethod
    def _default_list(cls, value: Any) -> Any:
        return value if value is not None else []


class LinktWebhookData(BaseModel):
    run_id: Optional[str] = None
    run_name: Optional[str] = None
    icp_name: Optional[str] = None
    icp_id: Optional[str] = None
    error_message: Optional[str] = None
    resources: LinktWebhookResources = Field(default_factory=LinktWebhookResources)
    total_signals: Optional[int] = None
    signal_breakdown: Optional[Dict[str, int]] = None

    class Config:
        extra = "allow"


class LinktWebhookPayload(BaseModel):
    """Run-completion webhook body sent by Linkt"""

    event_type: Optional[str] = None
    timestamp: Optional[str] = None
    data: LinktWebhookData = Field(default_factory=LinktWebhookData)

    class Config:
        extra = "allow"

    def signal_ids(self) -> List[str]:
        return list(self.data.resources.signals_created)


class PipelineInput(BaseModel):
    """Entry-point input: an inline signal or a raw webhook body"""

    signal: Optional[Signal] = None
    entities: List[Entity] = Field(default_factory=list)
    linkt_signal: Optional[Dict[str, Any]] = None
    webhook: Optional[Dict[str, Any]] = None


class PipelineResult(BaseModel):
    success: bool
    signal_id: Optional[str] = Field(None, alias="signalId")
    message: str

    class Config:
        populate_by_name = True
