"""ASGI entrypoint: settings from the environment, Supabase and model wiring."""

from fitness_coach.api.app import create_app
from fitness_coach.config import Settings
from fitness_coach.containers import build_container

settings = Settings()
app = create_app(build_container(settings))
