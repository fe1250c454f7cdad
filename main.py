"""Data integration job."""

import asyncio
import logging
import os
from pathlib import Path
from typing import Any

import yaml

from integration import CollectionError, DataIntegrationService
from integration.common import RootConfig, to_json
from integration.fetch import FetchRequest, HttpTransport

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = os.path.join(os.path.dirname(__file__), "config", "default.yaml")


def signal_handler(sig, frame):
    """Handle termination signals."""
    logger.info("Signal received, exiting gracefully...")
    exit(0)


def load_config(config_path: str) -> dict[str, Any]:
    """Read a YAML configuration file."""
    logger.info(f"Loading config from {config_path}")
    try:
        with open(config_path) as f:
            return yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.error(f"Config file not found: {config_path}")
        raise


async def main(
    config: dict[str, Any],
    out: Path | None = None,
    transport: HttpTransport | None = None,
) -> int:
    """Run the main process."""
    logger.info("Starting process")

    # Validate config
    config = RootConfig.model_validate(config)
    logger.debug(f"Validated config: {config.model_dump_json(indent=2)}")

    requests = FetchRequest.batch_from_config(config.requests)
    logger.info(f"Fetching {len(requests)} endpoint(s)")

    async with DataIntegrationService.from_config(config, transport=transport) as service:
        try:
            report = await service.run(requests)
        except CollectionError as e:
            logger.critical(f"Pipeline aborted: {e}")
            return 1

    output = to_json(report.results)
    if out is not None:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(output + "\n", encoding="utf-8")
        logger.info(f"Wrote analysis results to {out}")
    else:
        print("\n### Analysis results ###")
        print(output)

    return 0


if __name__ == "__main__":
    import argparse
    import signal
    import sys
    import time

    # Configure logging
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    # Register signal handlers
    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    parser = argparse.ArgumentParser(description="Collect API data and run the analysis")
    parser.add_argument("--config", type=str, default=DEFAULT_CONFIG, help="YAML config file")
    parser.add_argument("--out", type=Path, default=None, help="Write the JSON result here")
    args = parser.parse_args()

    config = load_config(args.config)

    # Run job and measure time
    start = time.time()
    code = asyncio.run(main(config, out=args.out))
    end = time.time()

    logger.info(f"Workflow completed in {end - start:.2f} seconds")
    sys.exit(code)
