class V2rayConfigError(RuntimeError):
    """Base class for failures while generating the V2Ray configuration file."""


class DirectoryCreationError(V2rayConfigError):
    pass


class IdentifierSynthesisError(V2rayConfigError):
    pass


class UnsupportedTransportError(V2rayConfigError):
    """Raised when the transport selector is not one of the supported transports."""

    def __init__(self, transport_type: object) -> None:
        self.transport_type = transport_type
        super().__init__(f"Unsupported transport type: {transport_type!r}")


class SerializationError(V2rayConfigError):
    pass


class FileOpenError(V2rayConfigError):
    pass


class FileWriteError(V2rayConfigError):
    pass
