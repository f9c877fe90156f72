"""Environment-driven settings for the outreach planner"""

import os

# Key-value store
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./outreach_planner.db")
KV_NAMESPACE = os.getenv("KV_NAMESPACE", "outreach-planner")

# OpenAI completion
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-5-mini")

# Linkt signal/entity API
LINKT_API_KEY = os.getenv("LINKT_API_KEY")
LINKT_ENVIRONMENT = "production" if os.getenv("LINKT_ENVIRONMENT") == "production" else "staging"
LINKT_BASE_URLS = {
    "production": "https://api.linkt.ai",
    "staging": "https://api.staging.linkt.ai",
}
LINKT_BASE_URL = os.getenv("LINKT_BASE_URL", LINKT_BASE_URLS[LINKT_ENVIRONMENT])
LINKT_TIMEOUT_SECONDS = float(os.getenv("LINKT_TIMEOUT_SECONDS", "30"))

# Landing page sandbox
MODAL_APP_NAME = os.getenv("MODAL_APP_NAME", "outreach-planner-sandbox")
LANDING_PAGE_ENABLED = os.getenv("LANDING_PAGE_ENABLED", "true").lower() not in ("0", "false", "no")
# Modal secret holding the model-provider key(s) OpenCode uses inside the sandbox.
# Unset falls back to forwarding OPENAI_API_KEY.
MODAL_SECRET_NAME = os.getenv("MODAL_SECRET_NAME")
