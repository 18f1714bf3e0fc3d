"""
The V2Ray package.
Turns the simplified configuration into the daemon's configuration file.
"""
from .errors import (
    DirectoryCreationError,
    FileOpenError,
    FileWriteError,
    IdentifierSynthesisError,
    SerializationError,
    UnsupportedTransportError,
    V2rayConfigError,
)
from .loader import load_config
from .schema import SimplifiedConfig, TransportType, parse_config
from .document import build_daemon_config, transform, write_config

__all__ = [
    "DirectoryCreationError",
    "FileOpenError",
    "FileWriteError",
    "IdentifierSynthesisError",
    "SerializationError",
    "SimplifiedConfig",
    "TransportType",
    "UnsupportedTransportError",
    "V2rayConfigError",
    "build_daemon_config",
    "load_config",
    "parse_config",
    "transform",
    "write_config",
]
