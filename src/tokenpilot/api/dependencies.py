"""
FastAPI dependencies.

The registry and settings live on ``app.state`` so every application built
by ``create_app`` serves its own knowledge base.
"""

from typing import Annotated

from fastapi import Depends, Request

from tokenpilot.config import Settings
from tokenpilot.engine import KnowledgeBaseRegistry


def get_registry(request: Request) -> KnowledgeBaseRegistry:
    return request.app.state.registry


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


Registry = Annotated[KnowledgeBaseRegistry, Depends(get_registry)]
AppSettings = Annotated[Settings, Depends(get_app_settings)]
