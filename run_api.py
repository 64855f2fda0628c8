"""FitStreak HTTP server launcher.

Usage:
    python run_api.py

Host and port come from API_HOST / API_PORT. Auto-reload is on outside
production.
"""

import uvicorn

from src.config import config

if __name__ == "__main__":
    base = f"http://localhost:{config.API_PORT}"
    print(f"Starting FitStreak API ({config.ENVIRONMENT})...")
    print(f"API docs: {base}/api/docs")
    print(f"Health check: {base}/api/health")
    print(f"Cron tick: {base}/api/cron/tick?token=...")
    print("\nPress Ctrl+C to stop\n")

    uvicorn.run(
        "src.interfaces.api.main:app",
        host=config.API_HOST,
        port=config.API_PORT,
        reload=config.ENVIRONMENT != "production",
        log_level="info",
    )
