from __future__ import annotations

import logging

import uvicorn

from .config import DEFAULT_API_CONFIG


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "restaurant_analytics.app:app",
        host=DEFAULT_API_CONFIG.host,
        port=DEFAULT_API_CONFIG.port,
    )


if __name__ == "__main__":
    main()
