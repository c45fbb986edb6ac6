"""Process bootstrap: ``python -m multi_model_advisor``.

Any error while loading settings or starting the server is fatal and
ends the process with exit status 1.
"""

import sys

import uvicorn

from multi_model_advisor.core.config import get_settings
from multi_model_advisor.core.logging import configure_logging, get_logger
from multi_model_advisor.main import create_app


def main() -> None:
    """Load settings and serve the advisor API until interrupted."""
    settings = get_settings()
    configure_logging(level=settings.effective_log_level)

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.effective_log_level.lower(),
    )


def run() -> None:
    """Console-script entry point."""
    try:
        main()
    except Exception:
        get_logger(__name__).exception("Fatal error in main()")
        sys.exit(1)


if __name__ == "__main__":
    run()
