"""
Entity context rendering shared by the outreach and landing page generators.

Both generators describe the resolved company and primary contact to the
model and add a call-to-action hint that depends on which of the two was
found. Every rendered field falls back to "Unknown".
"""

from typing import Any, List, Optional

from .signal import Entity, EntityType

UNKNOWN = "Unknown"


def to_text(value: Any) -> Optional[str]:
    """Strings are stripped, numbers stringified, anything else is None"""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _first(*values: Optional[str]) -> Optional[str]:
    for value in values:
        if value is not None:
            return value
    return None


def find_company_entity(entities: List[Entity]) -> Optional[Entity]:
    """
    The entity describing the company.

    An explicit company entity wins; otherwise any non-person entity that
    carries a company_name.
    """
    for entity in entities:
        if entity.entity_type == EntityType.COMPANY:
            return entity
    for entity in entities:
        if entity.entity_type != EntityType.PERSON and to_text(entity.data.get("company_name")):
            return entity
    return None


def find_person_entity(entities: List[Entity]) -> Optional[Entity]:
    for entity in entities:
        if entity.entity_type == EntityType.PERSON or isinstance(entity.data.get("email"), str):
            return entity
    return None


def resolve_company_name(entities: List[Entity]) -> Optional[str]:
    """
    Company display name for a signal.

    Precedence: company entity's name, its company_name, then a person
    entity's company_name. Empty strings are skipped.
    """
    company = find_company_entity(entities)
    person = next((e for e in entities if e.entity_type == EntityType.PERSON), None)

    company_data = company.data if company else {}
    person_data = person.data if person else {}

    return (
        to_text(company_data.get("name"))
        or to_text(company_data.get("company_name"))
        or to_text(person_data.get("company_name"))
        or None
    )


def build_entity_context(entities: List[Entity], for_landing_page: bool = False) -> str:
    """
    Render company and contact details for a prompt.

    The landing page variant uses a markdown heading and leaves out the
    company description and contact email.
    """
    if not entities:
        if for_landing_page:
            return "## Entity Context\nNo entity data available."
        return "Entity Context: None provided."

    company = find_company_entity(entities)
    contact = find_person_entity(entities)
    company_data = company.data if company else {}
    contact_data = contact.data if contact else {}

    company_name = _first(to_text(company_data.get("name")), to_text(company_data.get("company_name")))
    if not for_landing_page:
        company_name = _first(company_name, to_text(contact_data.get("company_name")))

    fields = [
        ("Company Name", company_name),
        ("Company Industry", to_text(company_data.get("industry"))),
        ("Company Size", _first(to_text(company_data.get("size")), to_text(company_data.get("employees")))),
        ("Company Location", _first(to_text(company_data.get("location")), to_text(company_data.get("headquarters")))),
        ("Company Website", _first(to_text(company_data.get("website")), to_text(company_data.get("company_domain")))),
    ]
    if not for_landing_page:
        fields.append(("Company Description", to_text(company_data.get("description"))))

    fields.append(("Primary Contact", to_text(contact_data.get("name"))))
    fields.append(("Contact Title", to_text(contact_data.get("title"))))
    if not for_landing_page:
        fields.append(("Contact Email", to_text(contact_data.get("email"))))
    fields.append(("Contact LinkedIn", to_text(contact_data.get("linkedin_url"))))

    header = "## Entity Context" if for_landing_page else "Entity Context:"
    lines = [f"- {label}: {value if value is not None else UNKNOWN}" for label, value in fields]
    return "\n".join([header] + lines)


def build_cta_guidance(entities: List[Entity], for_landing_page: bool = False) -> str:
    """Call-to-action hint: person-targeted, company-level, or general"""
    contact = find_person_entity(entities)
    company = find_company_entity(entities)
    company_data = company.data if company else {}
    contact_data = contact.data if contact else {}

    contact_name = to_text(contact_data.get("name"))
    company_name = _first(
        to_text(company_data.get("name")),
        to_text(company_data.get("company_name")),
        to_text(contact_data.get("company_name")),
    )

    if contact:
        if for_landing_page:
            return (
                f"Focus the CTA on a direct outreach to {contact_name or 'the contact'} at "
                f"{company_name or 'their company'}, such as booking a 15-minute strategy call "
                f"or requesting a tailored plan."
            )
        return (
            f"Target a direct conversation with {contact_name or 'the contact'} about "
            f"{company_name or 'their team'}'s current priorities. Offer a short intro call "
            f"and a tailored insight."
        )

    if company:
        if for_landing_page:
            return (
                f"Focus the CTA on {company_name or 'the company'} with a clear next step "
                f"(request a tailored assessment, benchmark report, or strategy session)."
            )
        return (
            f"Target a company-level CTA for {company_name or 'the team'} such as requesting "
            f"a tailored assessment, benchmark, or strategy session."
        )

    if for_landing_page:
        return "Use a general B2B CTA to request a tailored plan or short consultation."
    return "Use a general CTA asking if they want to learn more or see a tailored plan."
