"""
Entry point for the Lemon Learn API.

Run with:
    uvicorn main:app --reload --port 8100
    python main.py
"""
import uvicorn

from config import get_settings
from src.api.main import create_app
from src.lessons.log_config import configure_logging

settings = get_settings()
configure_logging(settings)
app = create_app(settings)

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
        log_level=settings.log_level.lower(),
    )
