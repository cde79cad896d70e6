"""Audit module - structured invocation logging."""

from .logger import audit_tool_invocation, log_tool_invocation, AuditContext, AuditStatus

__all__ = [
    "audit_tool_invocation",
    "log_tool_invocation",
    "AuditContext",
    "AuditStatus",
]
