"""
Landing Page Generator

Runs the OpenCode CLI inside a sandbox to write a single-file HTML landing
page for a signal, then reads the file back.

Flow:
    create sandbox -> dispatch `opencode run <prompt>` -> poll output file
    -> (found | timed out | error) -> destroy sandbox (always)

The command is fire-and-forget: the sandbox returns as soon as it is
queued, so completion is detected by polling the output path until it
holds an HTML document. Any failure yields None; this generator never
raises.
"""

from typing import List, Optional
import asyncio
import re
import time

from loguru import logger
from pydantic import BaseModel, Field

from ..clients.sandbox import SandboxHandle, SandboxProvider, SandboxSpec
from ..core.entity_context import build_cta_guidance, build_entity_context
from ..core.signal import KNOWN_SIGNAL_TYPES, Entity, Signal

DOCTYPE = "<!DOCTYPE html>"

_DOCTYPE_DOCUMENT = re.compile(r"<!DOCTYPE html>[\s\S]*</html>", re.IGNORECASE)
_HTML_DOCUMENT = re.compile(r"<html[\s\S]*</html>", re.IGNORECASE)


class LandingPageConfig(BaseModel):
    """Polling limits, output location and sandbox resources"""

    max_wait_seconds: float = Field(180.0, description="Give up polling after this long")
    poll_interval_seconds: float = Field(3.0, description="Delay between file reads")
    min_html_length: int = Field(100, description="Shorter content is treated as not ready")
    output_path: str = Field("/root/output.html", description="Where OpenCode writes the page")
    sandbox: SandboxSpec = Field(default_factory=SandboxSpec)


def extract_html_from_output(output: str) -> Optional[str]:
    """
    Pull the HTML document out of raw output that may carry commentary.

    Prefers a DOCTYPE-through-</html> match; falls back to <html>...</html>
    with a DOCTYPE prepended. Returns None when neither is present.
    """
    match = _DOCTYPE_DOCUMENT.search(output)
    if match:
        return match.group(0)

    match = _HTML_DOCUMENT.search(output)
    if match:
        return f"{DOCTYPE}\n{match.group(0)}"

    return None


def build_landing_page_prompt(signal: Signal, entities: List[Entity], output_path: str) -> str:
    """Natural-language instruction for the OpenCode run"""
    readable_type = signal.type.replace("_", " ")
    category = KNOWN_SIGNAL_TYPES.get(signal.type, readable_type)
    source_line = f"- Source: {signal.source}\n" if signal.source else ""

    return f"""Write a complete HTML landing page to {output_path} for this business signal.

IMPORTANT: Use the Write tool to create the file at {output_path}

## Signal Information
- Company: {signal.company}
- Signal Type: {readable_type}
- Strength: {signal.strength.value}
- Date: {signal.date}
- Summary: {signal.summary}
{source_line}
{build_entity_context(entities, for_landing_page=True)}

## Requirements

Create a single-file HTML landing page that:

1. Appeals broadly to anyone interested in {category}
2. Has professional, modern design with:
   - Clean typography using system fonts
   - Professional color scheme (blues/grays)
   - Responsive layout
   - All CSS in a <style> tag
3. Structure:
   - Hero section with compelling headline about {signal.company}
   - Key highlights section summarizing the signal
   - Context section (why this matters)
   - Call-to-action with targeted messaging
   - Footer with timestamp
4. Technical:
   - Single HTML file, all CSS inline in a <style> tag
   - No external dependencies or CDN links
   - Semantic HTML5
   - Mobile-responsive

CTA Guidance:
{build_cta_guidance(entities, for_landing_page=True)}

Write the complete HTML file now to {output_path}"""


class LandingPageGenerator:
    """Generate a landing page for a signal in a remote sandbox"""

    def __init__(
        self,
        sandbox_provider: Optional[SandboxProvider],
        config: Optional[LandingPageConfig] = None,
    ):
        """
        Args:
            sandbox_provider: Sandbox capability. None disables landing pages.
            config: Polling and resource limits
        """
        self.sandbox_provider = sandbox_provider
        self.config = config or LandingPageConfig()

    async def generate(self, signal: Signal, entities: Optional[List[Entity]] = None) -> Optional[str]:
        """Return the landing page HTML, or None if it could not be produced"""
        logger.info(f"Starting landing page generation for signal {signal.id}")

        if self.sandbox_provider is None:
            logger.error("Sandbox service not available")
            return None

        prompt = build_landing_page_prompt(signal, entities or [], self.config.output_path)
        sandbox: Optional[SandboxHandle] = None

        try:
            sandbox = await self.sandbox_provider.create(self.config.sandbox)
            logger.info(f"Sandbox {sandbox.id} created for signal {signal.id}")

            await sandbox.execute(
                ["opencode", "run", prompt],
                timeout_seconds=self.config.sandbox.timeout_seconds,
            )
            logger.info(f"OpenCode run dispatched in sandbox {sandbox.id}")

            html = await self._poll_for_output(sandbox)

            if html:
                logger.info(f"✓ Landing page generated for signal {signal.id} ({len(html)} chars)")
                return html

            logger.error(f"No valid HTML produced for signal {signal.id}")
            return None

        except Exception as e:
            logger.error(f"Landing page generation failed for signal {signal.id}: {e}")
            return None

        finally:
            if sandbox is not None:
                try:
                    await sandbox.destroy()
                    logger.debug(f"Sandbox {sandbox.id} destroyed")
                except Exception as e:
                    logger.warning(f"Failed to destroy sandbox {sandbox.id}: {e}")

    async def _poll_for_output(self, sandbox: SandboxHandle) -> Optional[str]:
        """Read the output path until it holds HTML or the wait ceiling passes"""
        start = time.monotonic()

        logger.info(
            f"Polling {self.config.output_path} every {self.config.poll_interval_seconds}s "
            f"(max {self.config.max_wait_seconds}s)"
        )

        while time.monotonic() - start < self.config.max_wait_seconds:
            content = await self._read_output(sandbox)

            if (
                content is not None
                and len(content) >= self.config.min_html_length
                and "<html" in content
            ):
                logger.info(
                    f"Output file found after {time.monotonic() - start:.1f}s "
                    f"({len(content)} chars)"
                )
                return extract_html_from_output(content)

            await asyncio.sleep(self.config.poll_interval_seconds)

        logger.error(
            f"Timed out after {time.monotonic() - start:.1f}s waiting for {self.config.output_path}"
        )
        return None

    async def _read_output(self, sandbox: SandboxHandle) -> Optional[str]:
        try:
            raw = await sandbox.read_file(self.config.output_path)
        except Exception:
            # not written yet
            return None

        if isinstance(raw, bytes):
            return raw.decode("utf-8", errors="replace")
        return raw
