"""Streakwise habit scheduling, progress and streak engine."""

from __future__ import annotations

from .config import BaseConfig, TestConfig
from .context import create_app_context

__all__ = ["BaseConfig", "TestConfig", "create_app_context"]
