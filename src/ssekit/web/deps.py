"""FastAPI dependency injection."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from ..core.config import SessionConfig
from ..core.registry import SessionRegistry
from .config import WebConfig


def _get_registry(request: Request) -> SessionRegistry:
    return request.app.state.registry


def _get_session_config(request: Request) -> SessionConfig:
    return request.app.state.session_config


def _get_web_config(request: Request) -> WebConfig:
    return request.app.state.web_config


Registry = Annotated[SessionRegistry, Depends(_get_registry)]
Sessions = Annotated[SessionConfig, Depends(_get_session_config)]
Web = Annotated[WebConfig, Depends(_get_web_config)]
