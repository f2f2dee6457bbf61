"""Entry point for the Yuletide tree scene."""
from __future__ import annotations

import logging
import random
from typing import Optional

from logging_config import setup_logging
from runtime.driver import SceneDriver
from runtime.pygame_host import PygameHost

logger = logging.getLogger("main")


def run(seed: Optional[int] = None, log_level: int = logging.INFO, log_file: Optional[str] = None) -> int:
    setup_logging(log_level, log_file)
    if seed is not None:
        logger.info("Using seed %d", seed)

    host = PygameHost()
    driver = SceneDriver(host.create_surface, host, host, host, rng=random.Random(seed))
    try:
        if not driver.start():
            return 1
        host.run()
    finally:
        driver.stop()
        host.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(run())
