import os

import uvicorn

from finance_tracker.app import app
from finance_tracker.core.settings import get_env_int
from finance_tracker.logger import get_logging_config


def main() -> None:
    uvicorn.run(
        app,
        host=os.getenv("HOST", "127.0.0.1"),
        port=get_env_int("PORT", 8000, min_value=1),
        log_config=get_logging_config(),
    )


if __name__ == "__main__":
    main()
