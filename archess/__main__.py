"""Run the server: python -m archess"""

import uvicorn

from archess.app import create_app
from archess.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
