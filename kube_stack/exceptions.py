"""Custom exceptions for kube-stack."""

from enum import Enum


class KubeStackError(Exception):
    """Base exception for all kube-stack errors."""

    def __init__(self, message: str, details: str = None):
        """Initialize the exception.

        Args:
            message: Main error message
            details: Additional details or suggestions
        """
        self.message = message
        self.details = details
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format the complete error message.

        Returns:
            Formatted error message with details
        """
        if self.details:
            return f"{self.message}\n\nDetails: {self.details}"
        return self.message


class LoadError(KubeStackError):
    """Exception raised when a cluster description cannot be read or parsed."""

    pass


class PlanViolation(str, Enum):
    """Rule broken by an invalid cluster address plan."""

    MISSING_FIELD = "MissingField"
    MALFORMED_CIDR = "MalformedCIDR"
    MALFORMED_ADDRESS = "MalformedAddress"
    INSTANCE_RANGE_OUTSIDE_VPC = "InstanceRangeOutsideVPC"
    CONTROLLER_OUTSIDE_INSTANCE_RANGE = "ControllerOutsideInstanceRange"
    POD_RANGE_OVERLAPS_VPC = "PodRangeOverlapsVPC"
    SERVICE_RANGE_OVERLAPS_VPC = "ServiceRangeOverlapsVPC"
    POD_SERVICE_RANGE_OVERLAP = "PodServiceRangeOverlap"
    SERVICE_ADDRESS_OUTSIDE_RANGE = "ServiceAddressOutsideRange"


class InvalidPlanError(KubeStackError):
    """Exception raised when a cluster description breaks an address plan rule."""

    def __init__(
        self,
        kind: PlanViolation,
        message: str,
        fields: dict[str, str] | None = None,
        details: str = None,
    ):
        """Initialize the exception.

        Args:
            kind: The violated rule
            message: Human-readable reason
            fields: Offending document keys mapped to their values
            details: Additional details or suggestions
        """
        self.kind = kind
        self.fields = dict(fields or {})
        super().__init__(message, details)


class CompactionError(KubeStackError):
    """Exception raised when TLS assets cannot be read or packaged."""

    pass


class RenderError(KubeStackError):
    """Exception raised when a template cannot be rendered."""

    pass
