"""
Generates the V2Ray daemon configuration from the simplified configuration.

The daemon document always has exactly one inbound and one outbound. The
inbound stream settings carry exactly one transport settings object, chosen
by the transport selector; the others are absent from the document.
"""

import json
import logging
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, ClassVar, Dict, List, Optional, Union

from raygate.v2ray.errors import (
    DirectoryCreationError,
    FileOpenError,
    FileWriteError,
    IdentifierSynthesisError,
    SerializationError,
    UnsupportedTransportError,
)
from raygate.v2ray.schema import (
    TCP_TYPE_HTTP,
    Client,
    Header,
    SimplifiedConfig,
    TransportType,
)

log = logging.getLogger(__name__)

LISTEN_ADDRESS = "127.0.0.1"
INBOUND_PROTOCOL = "vmess"
OUTBOUND_PROTOCOL = "freedom"
SECURITY_NONE = "none"
LIST_SEPARATOR = ","
HEADER_VALUE_SEPARATOR = ";;;"


#* --- Daemon Document Model ---
@dataclass
class InboundClient:
    id: str
    alter_id: int

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "alterId": self.alter_id}


@dataclass
class TcpRequestSettings:
    version: str
    method: str
    path: List[str]
    headers: Optional[Dict[str, List[str]]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"version": self.version, "method": self.method, "path": self.path}
        if self.headers is not None:
            data["headers"] = self.headers
        return data


@dataclass
class TcpResponseSettings:
    version: str
    status: str
    reason: str
    headers: Optional[Dict[str, List[str]]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"version": self.version, "status": self.status, "reason": self.reason}
        if self.headers is not None:
            data["headers"] = self.headers
        return data


@dataclass
class TcpSettings:
    KEY: ClassVar[str] = "tcpSettings"
    NETWORK: ClassVar[str] = "tcp"

    header_type: str
    request: Optional[TcpRequestSettings] = None
    response: Optional[TcpResponseSettings] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"header": {"type": self.header_type}}
        if self.request is not None:
            data["request"] = self.request.to_dict()
        if self.response is not None:
            data["response"] = self.response.to_dict()
        return data


@dataclass
class WebSocketSettings:
    KEY: ClassVar[str] = "wsSettings"
    NETWORK: ClassVar[str] = "ws"

    path: str
    headers: Optional[Dict[str, str]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"path": self.path}
        if self.headers is not None:
            data["headers"] = self.headers
        return data


@dataclass
class KcpSettings:
    KEY: ClassVar[str] = "kcpSettings"
    NETWORK: ClassVar[str] = "kcp"

    header_type: str
    mtu: int
    tti: int
    uplink_capacity: int
    downlink_capacity: int
    congestion: bool
    read_buffer_size: int
    write_buffer_size: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "header": {"type": self.header_type},
            "mtu": self.mtu,
            "tti": self.tti,
            "uplinkCapacity": self.uplink_capacity,
            "downlinkCapacity": self.downlink_capacity,
            "congestion": self.congestion,
            "readBufferSize": self.read_buffer_size,
            "writeBufferSize": self.write_buffer_size,
        }


@dataclass
class HttpSettings:
    KEY: ClassVar[str] = "httpSettings"
    NETWORK: ClassVar[str] = "http"

    host: List[str]
    path: str

    def to_dict(self) -> Dict[str, Any]:
        return {"host": self.host, "path": self.path}


TransportSettings = Union[TcpSettings, WebSocketSettings, KcpSettings, HttpSettings]


@dataclass
class StreamSettings:
    transport: TransportSettings
    security: str = SECURITY_NONE

    @property
    def network(self) -> str:
        return self.transport.NETWORK

    def to_dict(self) -> Dict[str, Any]:
        return {
            "network": self.network,
            "security": self.security,
            self.transport.KEY: self.transport.to_dict(),
        }


@dataclass
class Inbound:
    port: int
    clients: List[InboundClient]
    stream_settings: StreamSettings
    listen: str = LISTEN_ADDRESS
    protocol: str = INBOUND_PROTOCOL

    def to_dict(self) -> Dict[str, Any]:
        return {
            "listen": self.listen,
            "port": self.port,
            "protocol": self.protocol,
            "settings": {"clients": [client.to_dict() for client in self.clients]},
            "streamSettings": self.stream_settings.to_dict(),
        }


@dataclass
class Outbound:
    protocol: str = OUTBOUND_PROTOCOL
    settings: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"protocol": self.protocol, "settings": dict(self.settings)}


@dataclass
class DaemonConfig:
    inbound: Inbound
    outbound: Outbound = field(default_factory=Outbound)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "inbounds": [self.inbound.to_dict()],
            "outbounds": [self.outbound.to_dict()],
        }


#* --- Transformation ---
def synthesize_identifier() -> str:
    """Returns a new time-ordered (version 1) UUID string."""
    try:
        return str(uuid.uuid1())
    except (OSError, ValueError) as e:
        raise IdentifierSynthesisError(f"Unable to generate a user ID: {e}") from e


def resolve_clients(clients: List[Client]) -> List[InboundClient]:
    """
    Maps the simplified clients to daemon clients, generating an ID for every
    client that has none.

    The input list is left untouched; the generated ID is only visible in the
    returned records.
    """
    resolved = []
    for client in clients:
        client_id = client.user_id
        if not client_id:
            client_id = synthesize_identifier()
            log.info(f"Generated user ID '{client_id}' for a client without one.")
        resolved.append(InboundClient(id=client_id, alter_id=client.alter_id))
    return resolved


def _split_header_values(headers: List[Header]) -> Optional[Dict[str, List[str]]]:
    if not headers:
        return None
    return {header.key: header.value.split(HEADER_VALUE_SEPARATOR) for header in headers}


def _build_tcp_settings(config: SimplifiedConfig) -> TcpSettings:
    tcp = config.tcp
    settings = TcpSettings(header_type=tcp.type)
    if tcp.type == TCP_TYPE_HTTP:
        settings.request = TcpRequestSettings(
            version=tcp.request.version,
            method=tcp.request.method,
            path=tcp.request.path.split(LIST_SEPARATOR),
            headers=_split_header_values(tcp.request.headers),
        )
        settings.response = TcpResponseSettings(
            version=tcp.response.version,
            status=tcp.response.status,
            reason=tcp.response.reason,
            headers=_split_header_values(tcp.response.headers),
        )
    return settings


def _build_websocket_settings(config: SimplifiedConfig) -> WebSocketSettings:
    ws = config.web_socket
    headers = None
    if ws.headers:
        headers = {}
        for header in ws.headers:
            headers[header.key] = header.value
    return WebSocketSettings(path=ws.path, headers=headers)


def _build_kcp_settings(config: SimplifiedConfig) -> KcpSettings:
    kcp = config.kcp
    return KcpSettings(
        header_type=kcp.type,
        mtu=kcp.mtu,
        tti=kcp.tti,
        uplink_capacity=kcp.uplink_capacity,
        downlink_capacity=kcp.downlink_capacity,
        congestion=kcp.congestion,
        read_buffer_size=kcp.read_buffer_size,
        write_buffer_size=kcp.write_buffer_size,
    )


def _build_http_settings(config: SimplifiedConfig) -> HttpSettings:
    return HttpSettings(host=config.http2.host.split(LIST_SEPARATOR), path=config.http2.path)


TRANSPORT_BUILDERS = {
    TransportType.TCP: _build_tcp_settings,
    TransportType.WEBSOCKET: _build_websocket_settings,
    TransportType.KCP: _build_kcp_settings,
    TransportType.HTTP2: _build_http_settings,
}


def build_stream_settings(config: SimplifiedConfig) -> StreamSettings:
    """
    Builds the inbound stream settings for the selected transport.

    :raises UnsupportedTransportError: If the selector is not a known transport.
    """
    try:
        builder = TRANSPORT_BUILDERS[TransportType(config.transport_type)]
    except ValueError:
        raise UnsupportedTransportError(config.transport_type) from None
    return StreamSettings(transport=builder(config))


def build_daemon_config(config: SimplifiedConfig) -> DaemonConfig:
    """
    Builds the complete daemon document: one loopback inbound and one direct
    egress outbound.
    """
    stream_settings = build_stream_settings(config)
    inbound = Inbound(
        port=config.v2ray_port,
        clients=resolve_clients(config.clients),
        stream_settings=stream_settings,
    )
    return DaemonConfig(inbound=inbound)


def serialize(document: DaemonConfig) -> bytes:
    """Encodes the daemon document as UTF-8 JSON."""
    try:
        return json.dumps(document.to_dict(), indent=4, ensure_ascii=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Failed to serialize the V2Ray configuration: {e}") from e


def transform(config: SimplifiedConfig) -> bytes:
    """Builds and serializes the daemon document for `config`."""
    return serialize(build_daemon_config(config))


def write_config(config: SimplifiedConfig, destination: Path) -> Path:
    """
    Generates the daemon configuration and fully overwrites `destination`.

    Nothing touches the disk until the document has been generated, so an
    invalid transport leaves any previous file intact. A failure during the
    write itself can leave the file truncated.

    :param config: The simplified configuration.
    :param destination: The daemon configuration file.
    :return: The path that was written.
    """
    content = transform(config)

    try:
        destination.parent.mkdir(mode=0o755, parents=True, exist_ok=True)
    except OSError as e:
        raise DirectoryCreationError(f"Failed to create directory '{destination.parent}': {e}") from e

    try:
        handle = destination.open("wb")
    except OSError as e:
        raise FileOpenError(f"Unable to open configuration file '{destination}': {e}") from e

    with handle:
        try:
            handle.write(content)
        except OSError as e:
            raise FileWriteError(f"Failed to write configuration to '{destination}': {e}") from e

    log.info(f"V2Ray configuration written to '{destination}' ({len(content)} bytes).")
    return destination
