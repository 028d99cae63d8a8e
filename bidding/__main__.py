"""Module entrypoint for running the bid service with configured settings."""

import uvicorn

from bidding.config import get_server_config


def main() -> int:
    config = get_server_config()
    uvicorn.run(
        "bidding.main:app",
        host=config.listen.host,
        port=config.listen.port,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
