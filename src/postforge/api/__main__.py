"""Run the API server: python -m postforge.api"""

import os

import uvicorn

from postforge.core.log import configure_logging


def main() -> None:
    configure_logging()
    uvicorn.run(
        "postforge.api.app:app",
        host=os.environ.get("POSTFORGE_HOST", "127.0.0.1"),
        port=int(os.environ.get("POSTFORGE_PORT", "8000")),
        log_config=None,
    )


if __name__ == "__main__":
    main()
