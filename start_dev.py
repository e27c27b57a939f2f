#!/usr/bin/env python3
"""
Development launcher for the Article Credibility Backend.
Verifies the local environment, then starts the API server with uvicorn.
"""

import sys
import shutil
import asyncio
import importlib.util
from pathlib import Path
import httpx
import uvicorn
from dotenv import dotenv_values

from config import settings
from logging_config import get_logger

log = get_logger("start_dev")

# Import name -> distribution name
REQUIRED_PACKAGES = {
    "fastapi": "fastapi",
    "uvicorn": "uvicorn",
    "slowapi": "slowapi",
    "httpx": "httpx",
    "bs4": "beautifulsoup4",
    "transformers": "transformers",
    "torch": "torch",
    "loguru": "loguru",
    "dotenv": "python-dotenv",
}


def check_python_version() -> bool:
    """Check if Python version is compatible."""
    if sys.version_info < (3, 9):
        log.error(f"❌ Python 3.9+ is required, running {sys.version.split()[0]}")
        return False
    log.info(f"✅ Python version: {sys.version.split()[0]}")
    return True


def check_dependencies() -> bool:
    """Check if required packages are importable."""
    missing = [dist for name, dist in REQUIRED_PACKAGES.items() if importlib.util.find_spec(name) is None]
    if missing:
        log.error(f"❌ Missing packages, install with: pip install {' '.join(missing)}")
        return False
    log.info("✅ All dependencies installed")
    return True


def check_env_file(env_file: Path = Path(".env"), env_example: Path = Path("env.example")) -> bool:
    """Ensure a .env file exists, creating it from the template if needed."""
    if env_file.exists():
        log.info("✅ .env file exists")
        return True

    if not env_example.exists():
        log.error("❌ No .env file found and no template available")
        return False

    shutil.copyfile(env_example, env_file)
    log.warning("📝 Created .env from env.example, edit it with your configuration")
    return True


def report_analysis_mode(env_file: Path = Path(".env")) -> str:
    """Report which analysis engine the configuration selects."""
    values = dotenv_values(env_file) if env_file.exists() else {}
    mode = (values.get("ANALYSIS_MODE") or "auto").lower()
    has_key = bool(values.get("ANALYSIS_API_KEY") or values.get("LOVABLE_API_KEY"))

    if mode == "ai" and not has_key:
        log.warning("⚠️  ANALYSIS_MODE=ai but no ANALYSIS_API_KEY set, requests will fail with 500")
    elif mode == "auto":
        engine = "AI gateway" if has_key else "heuristic scorer"
        log.info(f"🔧 ANALYSIS_MODE=auto, using the {engine}")
    else:
        log.info(f"🔧 ANALYSIS_MODE={mode}")
    return mode


async def backend_running(port: int) -> bool:
    """Test if the backend is already responding."""
    try:
        async with httpx.AsyncClient(timeout=5.0) as client:
            response = await client.get(f"http://localhost:{port}/health")
            return response.status_code == 200
    except httpx.HTTPError:
        return False


def main() -> int:
    """Main startup function."""
    log.info("🚀 Article Credibility Backend - Development Setup")

    if not check_python_version() or not check_dependencies():
        return 1

    if not check_env_file():
        return 1

    report_analysis_mode()

    if asyncio.run(backend_running(settings.PORT)):
        log.info("✅ Backend is already running")
        return 0

    log.info(f"🚀 Starting backend on http://localhost:{settings.PORT} (docs at /docs)")
    uvicorn.run("app:app", host=settings.HOST, port=settings.PORT, reload=True)
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        log.info("🛑 Setup interrupted")
        sys.exit(1)
