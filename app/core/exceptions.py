"""
UGP — Custom Exceptions and operation results.
Each exception carries: message, error_code, http_status_code, optional detail dict.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

# ─────────────────────────────────────────────────────────────────────────────
# BASE
# ─────────────────────────────────────────────────────────────────────────────


class UGPError(Exception):
    """Root exception for all user group permission errors."""

    http_status_code: int = 400
    error_code: str = "UGP_ERROR"

    def __init__(self, message: str, detail: Optional[Dict[str, Any]] = None) -> None:
        self.message = message
        self.detail = detail or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_code": self.error_code,
            "message": self.message,
            "detail": self.detail,
        }


# ─────────────────────────────────────────────────────────────────────────────
# LOOKUPS
# ─────────────────────────────────────────────────────────────────────────────


class UserNotFoundError(UGPError):
    http_status_code = 404
    error_code = "USER_NOT_FOUND"

    def __init__(self, user_id: int) -> None:
        self.user_id = user_id
        super().__init__(
            message="The specified user was not found.",
            detail={"user_id": user_id},
        )


class NodeNotFoundError(UGPError):
    http_status_code = 404
    error_code = "NODE_NOT_FOUND"

    def __init__(self, node_id: int) -> None:
        self.node_id = node_id
        super().__init__(
            message="The specified node was not found.",
            detail={"node_id": node_id},
        )


class RoleNotFoundError(UGPError):
    """Raised for unknown role ids and for reserved roles that cannot be assigned."""

    http_status_code = 404
    error_code = "ROLE_NOT_FOUND"

    def __init__(self, role_id: int, reason: str = "not found") -> None:
        self.role_id = role_id
        self.reason = reason
        super().__init__(
            message=f"User type {role_id} {reason}.",
            detail={"user_type_id": role_id, "reason": reason},
        )


# ─────────────────────────────────────────────────────────────────────────────
# PROPAGATION
# ─────────────────────────────────────────────────────────────────────────────


class PropagationError(UGPError):
    """A store write failed before anything was overwritten."""

    http_status_code = 500
    error_code = "PROPAGATION_FAILED"

    def __init__(self, operation: str, written: int, pending: int, cause: Exception) -> None:
        self.operation = operation
        self.written = written
        self.pending = pending
        self.cause = cause
        super().__init__(
            message=self._describe(),
            detail={
                "operation": operation,
                "written": written,
                "pending": pending,
                "cause": str(cause),
            },
        )

    def _describe(self) -> str:
        return f"{self.operation} failed with {self.pending} write(s) pending: {self.cause}"


class PartialPropagationError(PropagationError):
    """
    A store write failed after some assignments were already overwritten.
    Every write is a full overwrite, so re-running the operation is safe.
    """

    error_code = "PARTIAL_PROPAGATION"

    def _describe(self) -> str:
        return (
            f"{self.operation} stopped after {self.written} write(s) with {self.pending} "
            f"pending: {self.cause}. Re-run the operation to complete it."
        )


def propagation_failure(
    operation: str, written: int, pending: int, cause: Exception
) -> PropagationError:
    """Partial when at least one write landed, plain otherwise."""
    cls = PartialPropagationError if written else PropagationError
    return cls(operation, written, pending, cause)


# ─────────────────────────────────────────────────────────────────────────────
# AUTH
# ─────────────────────────────────────────────────────────────────────────────


class PermissionDeniedError(UGPError):
    http_status_code = 403
    error_code = "PERMISSION_DENIED"

    def __init__(self, role: str, operation: str = "") -> None:
        self.role = role
        self.operation = operation
        super().__init__(
            message=f"Role '{role}' is not permitted to {operation or 'manage group permissions'}",
            detail={"role": role, "operation": operation},
        )


class AuthenticationError(UGPError):
    http_status_code = 401
    error_code = "AUTHENTICATION_ERROR"

    def __init__(self, reason: str = "Invalid or expired token") -> None:
        super().__init__(message=reason, detail={"reason": reason})


# ─────────────────────────────────────────────────────────────────────────────
# RESULTS
# ─────────────────────────────────────────────────────────────────────────────


@dataclass
class OperationResult:
    """Value returned by write operations instead of raising to the caller."""

    success: bool
    reason: Optional[str] = None
    error_code: Optional[str] = None
    detail: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls) -> "OperationResult":
        return cls(success=True)

    @classmethod
    def failure(cls, exc: UGPError) -> "OperationResult":
        return cls(
            success=False,
            reason=exc.message,
            error_code=exc.error_code,
            detail=exc.detail,
        )

    def to_dict(self) -> Dict[str, Any]:
        if self.success:
            return {"success": True}
        return {
            "success": False,
            "reason": self.reason,
            "error_code": self.error_code,
            "detail": self.detail,
        }
