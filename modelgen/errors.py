"""Error types for modelgen."""

from typing import Optional, Dict, Any


class ModelGenError(Exception):
    """Base exception for modelgen errors."""

    def __init__(self, message: str, code: str = "MODELGEN_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for reporting."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class DatabaseConnectionError(ModelGenError):
    """Connectivity to the database was lost or never established.

    This is the only failure that aborts a whole run.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="CONNECTION_ERROR", details=details)


class IntrospectionError(ModelGenError):
    """Listing tables, describing a table or running a foreign key query failed."""

    def __init__(
        self,
        message: str,
        table: Optional[str] = None,
        operation: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        error_details = details or {}
        if table is not None:
            error_details["table"] = table
        if operation is not None:
            error_details["operation"] = operation
        super().__init__(message, code="INTROSPECTION_ERROR", details=error_details)
        self.table = table
        self.operation = operation


class UnsupportedDialectError(ModelGenError):
    """No introspection adapter exists for the requested engine."""

    def __init__(self, dialect: str, supported: Optional[list] = None):
        super().__init__(
            f"Unsupported dialect: {dialect}",
            code="UNSUPPORTED_DIALECT",
            details={"dialect": dialect, "supported": supported or []},
        )


class ConfigurationError(ModelGenError):
    """Required connection settings are missing or invalid."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="CONFIGURATION_ERROR", details=details)


class WriteError(ModelGenError):
    """Error writing generated model files."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message, code="WRITE_ERROR", details={"path": path} if path else None)
