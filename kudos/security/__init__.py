"""Audit trail for moderation actions."""

from kudos.security.audit_log import AuditEntry, AuditLogger

__all__ = ["AuditEntry", "AuditLogger"]
