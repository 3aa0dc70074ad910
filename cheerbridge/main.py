"""cheerbridge server entry point"""

import uvicorn

from cheerbridge.app import create_app
from cheerbridge.core.config import get_settings


def main() -> None:
    settings = get_settings()
    app = create_app()
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
