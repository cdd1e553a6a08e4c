"""Run the API with uvicorn: python -m hitsongs"""

import uvicorn

from hitsongs.config import settings


def main() -> None:
    uvicorn.run(
        "hitsongs.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
