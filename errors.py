from typing import Optional


class PortalError(Exception):
    """Base error rendered as ``{"success": false, "message", "error"}``."""

    status_code = 500

    def __init__(self, message: str, error: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error = error


class InvalidType(PortalError):
    status_code = 400

    def __init__(self, accepted, required: bool = False):
        names = list(accepted)
        lead = "Type is required." if required else "Invalid type."
        listed = ", ".join(names[:-1]) + ", or " + names[-1] if len(names) > 1 else "".join(names)
        super().__init__(f"{lead} Must be: {listed}")
        self.accepted = tuple(names)


class InvalidIdentifier(PortalError):
    status_code = 400

    def __init__(self, value: str):
        super().__init__("Invalid id", error=f"'{value}' is not a valid record id")


class NotFound(PortalError):
    status_code = 404


class StoreError(PortalError):
    status_code = 500


class Timeout(PortalError):
    status_code = 504
