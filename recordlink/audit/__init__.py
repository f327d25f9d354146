"""Audit logging package."""

from recordlink.audit.logger import (
    ResolutionAuditLogger,
    configure_logging,
    create_correlation_id,
)

__all__ = ["ResolutionAuditLogger", "configure_logging", "create_correlation_id"]
