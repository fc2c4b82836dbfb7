# =============================================================================
# main.py  —  Entry Point for the Products MCP Server
# =============================================================================
#
# HOW TO RUN:
#   uv run python main.py                      # stdio transport (default)
#   MCP_TRANSPORT=http uv run python main.py   # streamable HTTP on MCP_HOST:MCP_PORT
#
# WHAT HAPPENS:
#   1. Loads .env (COSMOS_DB_ENDPOINT, COSMOS_DB_KEY, ...) into the environment
#   2. Builds Settings from the environment (core/config.py)
#   3. Configures logging to stderr
#   4. Builds the Cosmos-backed components and the tool registry
#      (tools/mcp_server.py) and serves them until interrupted
# =============================================================================

import logging
import sys

from dotenv import load_dotenv

from core.config import ConfigError, Settings
from tools.mcp_server import configure_logging, run


def main() -> None:
    # Must happen before Settings.from_env() reads os.environ.
    load_dotenv()

    try:
        settings = Settings.from_env()
    except ConfigError as exc:
        configure_logging()
        logging.getLogger("main").error(str(exc))
        sys.exit(2)

    configure_logging(settings.log_level)
    logging.getLogger("main").info(
        "Starting %s (transport=%s)", settings.server_name, settings.transport
    )
    run(settings)


if __name__ == "__main__":
    main()
