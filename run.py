#!/usr/bin/env python3
"""Run script for karen."""

import logging
import os

import uvicorn

if __name__ == "__main__":
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "karen.api.app:app",
        host=os.getenv("KAREN_HOST", "0.0.0.0"),
        port=int(os.getenv("KAREN_PORT", "8000")),
        reload=os.getenv("DEBUG", "False").lower() == "true",
    )
