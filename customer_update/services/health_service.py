# customer_update/services/health_service.py
from __future__ import annotations

from datetime import datetime, timezone

from customer_update.config import Settings
from customer_update.schemas.customers import HealthStatus


def get_health(settings: Settings) -> HealthStatus:
    return HealthStatus(
        status="Healthy",
        timestamp=datetime.now(timezone.utc),
        version=settings.app_version,
        environment=settings.environment,
    )
