# status_relay/errors.py


class RelayError(Exception):
    """Base class for errors raised by the relay."""


class InvalidRequest(RelayError):
    """A required field is missing; rendered as HTTP 400."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ChannelClosed(RelayError):
    """Write attempted on a channel whose stream has already ended."""


class PortInUse(RelayError):
    def __init__(self, port: int):
        super().__init__(f"Port {port} is already in use")
        self.port = port
