"""
Main entry point for the RelayChat server.

Usage:
    python run_fastapi.py

Or with uvicorn directly:
    uvicorn relaychat.fastapi_app:app --host 0.0.0.0 --port 5001 --reload
"""

import io
import sys

# Set UTF-8 encoding for stdout/stderr to handle Unicode characters on Windows
if sys.platform == "win32":
    sys.stdout = io.TextIOWrapper(
        sys.stdout.buffer, encoding="utf-8", errors="replace", line_buffering=True
    )
    sys.stderr = io.TextIOWrapper(
        sys.stderr.buffer, encoding="utf-8", errors="replace", line_buffering=True
    )

import uvicorn

from relaychat.config.settings import Config

if __name__ == "__main__":
    debug = Config.ENV == "development"

    print(f"Starting RelayChat in {Config.ENV} mode ({Config.STORAGE_BACKEND} storage)...")
    print(f"Server running on http://{Config.HOST}:{Config.PORT}")
    print(f"Live channel at ws://{Config.HOST}:{Config.PORT}/ws?token=<access token>")

    uvicorn.run(
        "relaychat.fastapi_app:app",
        host=Config.HOST,
        port=Config.PORT,
        reload=debug,
        log_level="info" if debug else "warning",
    )
