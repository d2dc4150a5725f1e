"""Serve the autofill-prep API: ``uvicorn api_server:app`` or ``python api_server.py``."""

from __future__ import annotations

import os
import pathlib
import sys

SRC = pathlib.Path(__file__).resolve().parent / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from autofill_prep.api.app import create_app
from autofill_prep.configuration import settings

app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api_server:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
