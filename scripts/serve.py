"""Run the yzroll HTTP service.

Usage:
    python scripts/serve.py

Host, port and reload come from ``YZROLL_APP_HOST``, ``YZROLL_APP_PORT``
and ``YZROLL_APP_DEBUG``.
"""

from __future__ import annotations

import uvicorn

from yzroll.infra.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "yzroll.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_debug,
        log_level=settings.log_level.lower(),
    )
