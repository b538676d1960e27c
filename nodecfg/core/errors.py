"""
Exception types for the configuration-state controller.

Caller-facing faults (NotFoundError, InvalidInputError, SystemicError) are
what the controller surfaces. The remaining types are raised by collaborators
and are translated into SystemicError by the controller.
"""


class NodeConfigError(Exception):
    """Base class for all controller faults."""
    pass


class NotFoundError(NodeConfigError):
    """Raised when the device record has not been registered."""
    pass


class InvalidInputError(NodeConfigError):
    """
    Raised when the caller asked for something the controller cannot do.

    Fields:
        input_name: Name of the offending input (e.g. "configstate.state")
    """

    def __init__(self, message: str, input_name: str = "") -> None:
        super().__init__(message)
        self.input_name = input_name


class SystemicError(NodeConfigError):
    """Raised when a collaborator failed or returned inconsistent data."""
    pass


class DeviceStoreError(Exception):
    """Raised when device store operations fail."""
    pass


class RegistryError(Exception):
    """Raised when the registry cannot answer a query."""
    pass


class InvalidVersionError(ValueError):
    """Raised when a version string is not a dotted list of integers."""
    pass
