"""WSGI entry point for the finance tracker API.

Run with a WSGI server (``gunicorn wsgi:app``) or directly for local
development: ``python wsgi.py [--port N]``.
"""

import os
import sys

from finance_tracker import create_app
from finance_tracker.config import get_global_settings

app = create_app()


def _port_from_args(argv, default: int) -> int:
    if len(argv) > 2 and argv[1] == "--port":
        return int(argv[2])
    return int(os.environ.get("PORT", default))


if __name__ == "__main__":
    settings = get_global_settings()
    app.run(
        debug=settings.app_env == "development",
        host="0.0.0.0",
        port=_port_from_args(sys.argv, 5000),
    )
