"""CLI entry point: python -m billbot"""

from __future__ import annotations

import uvicorn

from billbot.config import BotConfig
from billbot.observability.logging import setup_logging


def main() -> None:
    config = BotConfig.from_yaml()
    setup_logging(config.log_level)

    uvicorn.run(
        "billbot.app:create_app",
        factory=True,
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
