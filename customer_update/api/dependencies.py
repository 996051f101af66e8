# customer_update/api/dependencies.py
"""
FastAPI dependencies for objects built once in create_app and parked on
app.state. Tests swap them through app.dependency_overrides.
"""
from __future__ import annotations

from fastapi import Request

from customer_update.config import Settings
from customer_update.db.session import get_db
from customer_update.services.external_validator import ExternalValidator

__all__ = ["get_app_settings", "get_db", "get_external_validator"]


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_external_validator(request: Request) -> ExternalValidator:
    return request.app.state.external_validator
