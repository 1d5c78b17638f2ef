"""Monitoring exports."""

from quant_lab.monitoring.audit import AuditLog

__all__ = ["AuditLog"]
