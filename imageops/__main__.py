"""Run the service with uvicorn: ``python -m imageops``."""

import uvicorn

from imageops.core.config import settings


def main() -> None:
    uvicorn.run(
        "imageops.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,  # logging is configured by imageops.core.logging_config
    )


if __name__ == "__main__":
    main()
