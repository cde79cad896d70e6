"""Structured audit logging for tool invocations."""

import time
from contextlib import asynccontextmanager
from enum import Enum
from typing import AsyncGenerator
from uuid import uuid4

import structlog

logger = structlog.get_logger("audit")


class AuditStatus(str, Enum):
    """Status of a tool invocation."""

    success = "success"
    error = "error"
    timeout = "timeout"


class AuditContext:
    """Tracks timing and outcome of a single tool invocation.

    Attributes:
        request_id: Correlation ID for tracing.
        tool_name: Which tool is being invoked.
        start_time: When the invocation started.
        status: Final status of the invocation.
        error_code: Error code if failed.
    """

    def __init__(self, request_id: str, tool_name: str) -> None:
        self.request_id = request_id
        self.tool_name = tool_name
        self.start_time = time.perf_counter()
        self.status = AuditStatus.success
        self.error_code: str | None = None

    def mark_error(self, error_code: str) -> None:
        """Mark the invocation as failed with an error code.

        Args:
            error_code: The error code to record.
        """
        self.status = AuditStatus.error
        self.error_code = error_code

    def mark_timeout(self) -> None:
        """Mark the invocation as timed out."""
        self.status = AuditStatus.timeout
        self.error_code = "API_TIMEOUT"

    @property
    def duration_ms(self) -> int:
        """Calculate duration in milliseconds."""
        elapsed = time.perf_counter() - self.start_time
        return int(elapsed * 1000)


def log_tool_invocation(context: AuditContext) -> None:
    """Emit the ``tool_invocation`` event for a finished invocation."""
    log = logger.warning if context.status is not AuditStatus.success else logger.info
    log(
        "tool_invocation",
        request_id=context.request_id,
        tool_name=context.tool_name,
        status=context.status.value,
        duration_ms=context.duration_ms,
        error_code=context.error_code,
    )


@asynccontextmanager
async def audit_tool_invocation(
    tool_name: str,
    request_id: str | None = None,
) -> AsyncGenerator[AuditContext, None]:
    """Context manager for auditing tool invocations.

    Automatically tracks timing and logs when the context exits.

    Args:
        tool_name: Which tool is being invoked.
        request_id: Correlation ID (generated if not provided).

    Yields:
        AuditContext for marking status/errors.

    Example:
        async with audit_tool_invocation("cancel_order") as ctx:
            try:
                result = await do_work()
            except ApiTimeoutError:
                ctx.mark_timeout()
                raise
    """
    context = AuditContext(request_id or str(uuid4()), tool_name)
    try:
        yield context
    except BaseException:
        if context.status is AuditStatus.success:
            context.mark_error("UNHANDLED_EXCEPTION")
        raise
    finally:
        log_tool_invocation(context)
