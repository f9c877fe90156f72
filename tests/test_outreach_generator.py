import asyncio
import json

import pytest

from outreach_planner.generators.outreach import OutreachGenerationError, OutreachGenerator

from conftest import FULL_OUTREACH, FakeOpenAI, company_entity, fake_openai_with, make_signal, person_entity


def test_generates_full_outreach():
    client = fake_openai_with(FULL_OUTREACH)
    generator = OutreachGenerator(client=client, model="test-model")

    outreach = asyncio.run(generator.generate(make_signal()))

    assert outreach.email.subject == "Congrats on the Series B"
    assert outreach.linkedin == "Big week for Acme Corp."
    assert outreach.twitter == "Acme Corp just raised $40M."
    assert outreach.call_points == ["Growth plans", "Hiring roadmap", "Tooling gaps"]
    assert outreach.summary == "Acme Corp raised a Series B to expand."


def test_request_uses_json_mode_and_signal_fields():
    client = fake_openai_with(FULL_OUTREACH)
    generator = OutreachGenerator(client=client, model="test-model")
    signal = make_signal(source="https://example.com/acme", details={"round": "Series B"})
    entities = [
        company_entity(name="Acme Corp", industry="Manufacturing"),
        person_entity(name="Jane Doe", title="CFO", email="jane@acme.test"),
    ]

    asyncio.run(generator.generate(signal, entities))

    request = client.completions.calls[0]
    system, user = request["messages"]

    assert request["model"] == "test-model"
    assert request["response_format"] == {"type": "json_object"}
    assert system["role"] == "system"
    assert '"callPoints"' in system["content"]
    assert "Jane Doe" in system["content"]
    assert "Company: Acme Corp" in user["content"]
    assert "Strength: HIGH" in user["content"]
    assert "Source: https://example.com/acme" in user["content"]
    assert '"round": "Series B"' in user["content"]
    assert "- Company Industry: Manufacturing" in user["content"]
    assert "- Contact Email: jane@acme.test" in user["content"]
    assert "- Company Location: Unknown" in user["content"]


def test_missing_fields_default_to_empty():
    client = fake_openai_with({"linkedin": "Only this"})

    outreach = asyncio.run(OutreachGenerator(client=client).generate(make_signal()))

    assert outreach.linkedin == "Only this"
    assert outreach.email.subject == ""
    assert outreach.call_points == []
    assert outreach.summary == ""


def test_empty_response_raises():
    client = FakeOpenAI(content="")

    with pytest.raises(OutreachGenerationError, match="No response from LLM"):
        asyncio.run(OutreachGenerator(client=client).generate(make_signal()))


def test_malformed_json_raises():
    client = FakeOpenAI(content="{not json")

    with pytest.raises(json.JSONDecodeError):
        asyncio.run(OutreachGenerator(client=client).generate(make_signal()))


def test_non_object_json_raises():
    client = FakeOpenAI(content="[1, 2, 3]")

    with pytest.raises(OutreachGenerationError):
        asyncio.run(OutreachGenerator(client=client).generate(make_signal()))
