"""Vercel serverless function exposing the FastAPI app."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from fitness_coach.api.asgi import app  # noqa: E402

__all__ = ["app"]
