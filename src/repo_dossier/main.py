from __future__ import annotations
import logging
import uvicorn
from repo_dossier.infrastructure.config import get_settings

# Libraries that log every request at INFO.
_CHATTY_LOGGERS = ("httpx", "httpcore")


def main() -> None:
    """Configure logging and serve the app factory with uvicorn."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).info("Serving on http://%s:%d", settings.host, settings.port)
    uvicorn.run(
        "repo_dossier.interface.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
