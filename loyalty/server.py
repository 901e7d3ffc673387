"""Run the loyalty API with uvicorn on RUN_ADDRESS."""

import uvicorn

from loyalty.config import get_settings


def main() -> None:
    settings = get_settings()
    host, port = settings.run_host_port
    uvicorn.run(
        "loyalty.main:app",
        host=host,
        port=port,
        log_level=settings.LOG_LEVEL.lower(),
        # dictConfig from setup_logging stays in effect
        log_config=None,
    )


if __name__ == "__main__":
    main()
