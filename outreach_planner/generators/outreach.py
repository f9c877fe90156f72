"""
Outreach Text Generator

Uses a single OpenAI chat completion in JSON mode to write the outreach
bundle for a signal: email, LinkedIn post, tweet, call points and summary.
"""

from typing import List, Optional
import json

from openai import AsyncOpenAI
from loguru import logger

from .. import config
from ..core.entity_context import build_cta_guidance, build_entity_context
from ..core.signal import Entity, Outreach, Signal


class OutreachGenerationError(RuntimeError):
    """Raised when the completion does not yield a usable JSON object"""


SYSTEM_PROMPT = """You are an expert B2B sales and marketing professional. Generate outreach content based on a business signal (news about a company).

Your output must be JSON with this exact structure:
{{
  "email": {{
    "subject": "compelling email subject line",
    "body": "personalized email body (2-3 paragraphs, professional tone)"
  }},
  "linkedin": "LinkedIn post (2-3 sentences, professional but engaging)",
  "twitter": "Tweet (under 280 chars, punchy and relevant)",
  "callPoints": ["talking point 1", "talking point 2", "talking point 3"],
  "summary": "2-3 sentence summary of the signal and why it matters"
}}

Guidelines:
- Reference the specific signal/news naturally
- Be relevant and timely, not overly salesy
- Email should have a clear call-to-action tailored to the entity context
- LinkedIn should be thought-leadership style
- Twitter should be concise and engaging
- Call points should be conversation starters for sales calls

CTA guidance:
{cta_guidance}"""


class OutreachGenerator:
    """Generate outreach content for a signal"""

    def __init__(self, client: Optional[AsyncOpenAI] = None, model: Optional[str] = None):
        """
        Args:
            client: OpenAI async client. If None, one is built from OPENAI_API_KEY.
            model: Completion model. Defaults to OPENAI_MODEL.
        """
        self.client = client or AsyncOpenAI(api_key=config.OPENAI_API_KEY)
        self.model = model or config.OPENAI_MODEL

    async def generate(self, signal: Signal, entities: Optional[List[Entity]] = None) -> Outreach:
        """
        Generate the outreach bundle.

        Raises:
            OutreachGenerationError: empty completion or non-object JSON
            json.JSONDecodeError: completion is not valid JSON
        """
        entities = entities or []

        system_prompt = self._build_system_prompt(entities)
        user_prompt = self._build_user_prompt(signal, entities)

        logger.info(f"Calling OpenAI ({self.model}) for outreach on signal {signal.id}")
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            response_format={"type": "json_object"},
        )

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise OutreachGenerationError("No response from LLM")

        payload = json.loads(content)
        if not isinstance(payload, dict):
            raise OutreachGenerationError("LLM response was not a JSON object")

        return Outreach.from_completion(payload)

    def _build_system_prompt(self, entities: List[Entity]) -> str:
        return SYSTEM_PROMPT.format(cta_guidance=build_cta_guidance(entities))

    def _build_user_prompt(self, signal: Signal, entities: List[Entity]) -> str:
        lines = [
            "Generate outreach content for this signal:",
            "",
            f"Company: {signal.company}",
            f"Signal Type: {signal.type}",
            f"Strength: {signal.strength.value}",
            f"Date: {signal.date}",
            f"Summary: {signal.summary}",
        ]
        if signal.source:
            lines.append(f"Source: {signal.source}")
        if signal.details:
            lines.append(f"Additional Details: {json.dumps(signal.details, default=str)}")

        lines.append("")
        lines.append(build_entity_context(entities))

        return "\n".join(lines)
