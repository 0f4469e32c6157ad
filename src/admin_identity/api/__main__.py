"""
admin_identity.api.__main__

`python -m admin_identity.api` / `admin-identity-api`.

Responsibilities:
- Build the app from environment settings.
- Serve it with uvicorn, leaving log formatting to structlog.
"""

from __future__ import annotations

import uvicorn

from admin_identity.api.app import create_app
from admin_identity.observability.logging import get_logger
from admin_identity.settings import get_settings

log = get_logger(__name__)


def main() -> None:
    settings = get_settings()
    app = create_app(settings=settings)

    log.info("api_serving", env=settings.env, host=settings.api_host, port=settings.api_port)
    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
        # Request lines come from RequestContextMiddleware with the request id attached.
        access_log=False,
        log_config=None,
    )


if __name__ == "__main__":
    main()
