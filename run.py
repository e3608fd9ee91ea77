#!/usr/bin/env python
"""
Entry point for the echobot webhook service.
Starts the FastAPI server with uvicorn.
"""

import uvicorn

from echobot.config import settings


def main():
    uvicorn.run(
        "echobot.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.ENVIRONMENT == "dev",
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
