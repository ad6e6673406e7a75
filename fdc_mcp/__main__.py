"""Run the FoodData Central MCP server on stdio.

Run with: python -m fdc_mcp  (or the ``fdc-mcp`` script)
"""

import logging
import sys

from .client import FdcClient
from .config import load_settings
from .exceptions import ConfigurationError
from .server import create_server

logger = logging.getLogger("fdc_mcp")


def main() -> None:
    """Load settings, register operations and serve until stdin closes."""
    # stdout carries the protocol, so logs go to stderr
    logging.basicConfig(
        stream=sys.stderr,
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        settings = load_settings()
    except ConfigurationError as exc:
        logger.error("Error: %s", exc)
        sys.exit(1)

    logging.getLogger().setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))

    client = FdcClient(api_key=settings.usda_api_key, base_url=settings.fdc_base_url)
    server = create_server(client, log_level=settings.log_level)

    logger.info("Food Data Central MCP server started with stdio transport")
    server.run(transport="stdio")


if __name__ == "__main__":
    main()
