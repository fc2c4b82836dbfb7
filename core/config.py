# =============================================================================
# core/config.py  —  Runtime settings
# =============================================================================
#
# Everything comes from environment variables.  main.py calls load_dotenv()
# first, so a local .env file works for development; in a deployed
# container the variables are injected directly.
#
# Settings is built once at startup and passed down explicitly.  Nothing
# in core/ reads os.environ on its own.
# =============================================================================

import os
from dataclasses import dataclass
from typing import Mapping, Optional


class ConfigError(ValueError):
    """Raised when required configuration is missing or malformed."""


_REQUIRED = {
    "cosmos_endpoint": "COSMOS_DB_ENDPOINT",
    "database_name": "COSMOS_DB_DATABASE",
    "product_container": "COSMOS_DB_PRODUCT_CONTAINER",
}


@dataclass(frozen=True)
class Settings:
    """Connection details for Cosmos DB plus server tuning knobs."""

    cosmos_endpoint: str
    database_name: str
    product_container: str
    summary_container: str = "product-summaries"
    cosmos_key: Optional[str] = None   # None means Entra ID (DefaultAzureCredential)

    product_max_results: int = 10      # default result limit for searches
    embedding_dimensions: int = 1536   # must match the container's vector policy
    request_timeout: Optional[float] = 30.0   # seconds; None disables

    server_name: str = "products-mcp-server"
    transport: str = "stdio"           # "stdio" or "http"
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Read settings from the environment (or any mapping, for tests).

        Raises:
            ConfigError: if a required variable is missing, or a numeric
                one can't be parsed.
        """
        env = os.environ if environ is None else environ

        missing = [var for var in _REQUIRED.values() if not env.get(var)]
        if missing:
            raise ConfigError(
                f"Missing required configuration: {', '.join(missing)}. "
                "Set them in the environment or in a .env file."
            )

        timeout = _number(env, "COSMOS_REQUEST_TIMEOUT", 30.0, float)
        transport = env.get("MCP_TRANSPORT", "stdio").strip().lower()
        if transport not in ("stdio", "http"):
            raise ConfigError(f"MCP_TRANSPORT must be 'stdio' or 'http', got '{transport}'.")

        max_results = _number(env, "PRODUCT_MAX_RESULTS", 10, int)
        if max_results < 1:
            raise ConfigError("PRODUCT_MAX_RESULTS must be at least 1.")

        return cls(
            **{attr: env[var] for attr, var in _REQUIRED.items()},
            summary_container=env.get("COSMOS_DB_SUMMARY_CONTAINER") or "product-summaries",
            cosmos_key=env.get("COSMOS_DB_KEY") or None,
            product_max_results=max_results,
            embedding_dimensions=_number(env, "EMBEDDING_DIMENSIONS", 1536, int),
            request_timeout=timeout if timeout > 0 else None,
            server_name=env.get("MCP_SERVER_NAME") or "products-mcp-server",
            transport=transport,
            host=env.get("MCP_HOST") or "127.0.0.1",
            port=_number(env, "MCP_PORT", 8000, int),
            log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
        )


def _number(env: Mapping[str, str], name: str, default, cast):
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got '{raw}'.") from None
