"""API v1 Route modules."""

from backend.routers.v1 import compensation, maintenance_kpi

__all__ = ["compensation", "maintenance_kpi"]
