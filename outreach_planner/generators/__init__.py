"""Outreach text and landing page generators"""

from .outreach import OutreachGenerator, OutreachGenerationError
from .landing_page import LandingPageGenerator, LandingPageConfig

__all__ = [
    "OutreachGenerator",
    "OutreachGenerationError",
    "LandingPageGenerator",
    "LandingPageConfig",
]
