#!/usr/bin/env python3
# backend/run.py
"""
Development server runner.

Settings come from the environment and an optional .env file in this
directory.
"""
import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "roombook.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info",
    )
