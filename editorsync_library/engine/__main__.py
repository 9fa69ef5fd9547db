"""Entry point for running the engine companion.

Usage:
    python -m editorsync_library.engine
"""

import asyncio
import logging
import sys

from ..config.loader import load_engine_settings
from .companion import EngineCompanion

logger = logging.getLogger(__name__)


def main() -> None:
    """Run the engine companion until interrupted."""
    settings = load_engine_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    companion = EngineCompanion(settings)
    try:
        asyncio.run(companion.serve_forever())
    except KeyboardInterrupt:
        logger.info("Received interrupt, shutting down")
    except OSError as e:
        logger.error(f"Failed to start engine companion on {settings.host}:{settings.port}: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
