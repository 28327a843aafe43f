"""ASGI entry point.

Run with ``uvicorn folio.main:app`` or the ``folio`` console script.
"""

from __future__ import annotations

import uvicorn

from folio.api.app import create_api_app
from folio.core.config import settings


app = create_api_app()


def main() -> None:
    uvicorn.run(
        "folio.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
        log_config=None,
    )


if __name__ == "__main__":
    main()
