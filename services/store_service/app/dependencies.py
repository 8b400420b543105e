"""FastAPI dependencies that read the app context built by ``create_app``."""

from fastapi import Request
from libs.common.config import Settings


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
