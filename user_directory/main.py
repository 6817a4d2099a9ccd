"""
Name: ASGI entrypoint (user_directory.main)

Responsibilities:
  - Re-export the FastAPI app for ASGI servers:
      uvicorn user_directory.main:app

Notes:
  - No configuration or IO here; the app is built in user_directory.api.main.
"""

from user_directory.api.main import app

__all__ = ["app"]
