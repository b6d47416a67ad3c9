"""Static configuration for notifi-client.

User-editable settings (environment, dapp address, mirror strategy, logging)
live in a single JSON file for quick edits without touching Python. Wallet
identity and URL overrides come from the environment via python-dotenv.
"""

import json
import os

from dotenv import load_dotenv

from core.config import DEFAULT_WALLET_BLOCKCHAIN

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

# Settings are loaded from config.json so users can switch environments or
# mirror strategy without editing code.
CONFIG_PATH = os.environ.get("NOTIFI_CONFIG", os.path.join(PROJECT_ROOT, "config.json"))


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


load_dotenv()

_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

_notifi = _CONFIG.get("notifi", {})
# Environment selects the GraphQL endpoint: Production, Staging, Development or Local.
ENVIRONMENT = _notifi.get("environment", "Development")
# The dapp address is issued by Notifi for each integrating dapp.
DAPP_ADDRESS = _notifi.get("dapp_address", "")
WALLET_BLOCKCHAIN = _notifi.get("wallet_blockchain", DEFAULT_WALLET_BLOCKCHAIN)
TIMEOUT_SECONDS = float(_notifi.get("timeout_seconds", 30))

# Mirror strategy controls how much remote state is cached locally.
# - MIRROR: "full", "partial", or "disabled"
# - MIRROR_COLLECTIONS: collections kept when MIRROR="partial"
MIRROR = _notifi.get("mirror", "full")
MIRROR_COLLECTIONS = list(_notifi.get("mirror_collections", []))

# Secrets and per-user identity stay in .env, outside the repo.
WALLET_ADDRESS = os.getenv("NOTIFI_WALLET_ADDRESS")
GQL_URL_OVERRIDE = os.getenv("NOTIFI_GQL_URL")

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
