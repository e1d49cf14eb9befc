#!/usr/bin/env python3
"""
Run script for the Akawo voice bookkeeping backend
"""
import uvicorn

from akawo.config.settings import settings
from akawo.main import app

if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port, reload=settings.debug)
