"""
Dataclasses for the simplified, user-facing V2Ray configuration.

Field names follow the keys of the simplified configuration file. Every
transport block is always present; only the one selected by
`transport_type` is used when the daemon configuration is generated.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, List


class TransportType(IntEnum):
    TCP = 1
    WEBSOCKET = 2
    KCP = 3
    HTTP2 = 4


TCP_TYPE_NONE = "none"
TCP_TYPE_HTTP = "http"


@dataclass
class Header:
    key: str = ""
    value: str = ""


@dataclass
class Client:
    user_id: str = ""
    alter_id: int = 0


@dataclass
class TcpRequest:
    version: str = ""
    method: str = ""
    path: str = ""
    headers: List[Header] = field(default_factory=list)


@dataclass
class TcpResponse:
    version: str = ""
    status: str = ""
    reason: str = ""
    headers: List[Header] = field(default_factory=list)


@dataclass
class TcpConfig:
    type: str = TCP_TYPE_NONE
    request: TcpRequest = field(default_factory=TcpRequest)
    response: TcpResponse = field(default_factory=TcpResponse)


@dataclass
class WebSocketConfig:
    path: str = ""
    headers: List[Header] = field(default_factory=list)


@dataclass
class KcpConfig:
    type: str = TCP_TYPE_NONE
    mtu: int = 0
    tti: int = 0
    uplink_capacity: int = 0
    downlink_capacity: int = 0
    congestion: bool = False
    read_buffer_size: int = 0
    write_buffer_size: int = 0


@dataclass
class Http2Config:
    host: str = ""
    path: str = ""


@dataclass
class SimplifiedConfig:
    clients: List[Client] = field(default_factory=list)
    v2ray_port: int = 0
    # Kept as a plain int so unsupported selectors reach the transformer.
    transport_type: int = 0
    tcp: TcpConfig = field(default_factory=TcpConfig)
    web_socket: WebSocketConfig = field(default_factory=WebSocketConfig)
    kcp: KcpConfig = field(default_factory=KcpConfig)
    http2: Http2Config = field(default_factory=Http2Config)


def _text(value: Any, default: str = "") -> str:
    return default if value is None else str(value)


def _number(value: Any) -> int:
    return 0 if value is None or value == "" else int(value)


def _flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "t", "yes", "y")
    return bool(value)


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    raw = data.get(name) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"'{name}' must be an object")
    return raw


def _parse_headers(raw: Any, name: str) -> List[Header]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValueError(f"'{name}' must be a list")
    headers = []
    for item in raw:
        if not isinstance(item, dict):
            raise ValueError(f"'{name}' entries must be objects")
        headers.append(Header(key=_text(item.get("key")), value=_text(item.get("value"))))
    return headers


def parse_config(data: Dict[str, Any]) -> SimplifiedConfig:
    """
    Builds a SimplifiedConfig from the raw mapping loaded from disk.

    Only structural problems are rejected here. The transport selector is
    validated when the daemon configuration is generated.

    :param data: The decoded configuration document.
    :return: The parsed configuration.
    """
    if not isinstance(data, dict):
        raise ValueError("configuration root must be an object")

    clients_raw = data.get("clients") or []
    if not isinstance(clients_raw, list):
        raise ValueError("'clients' must be a list")
    clients = []
    for item in clients_raw:
        if not isinstance(item, dict):
            raise ValueError("'clients' entries must be objects")
        clients.append(Client(
            user_id=_text(item.get("user_id")),
            alter_id=_number(item.get("alter_id")),
        ))

    tcp_raw = _section(data, "tcp")
    request_raw = _section(tcp_raw, "request")
    response_raw = _section(tcp_raw, "response")
    tcp = TcpConfig(
        type=_text(tcp_raw.get("type"), TCP_TYPE_NONE),
        request=TcpRequest(
            version=_text(request_raw.get("version")),
            method=_text(request_raw.get("method")),
            path=_text(request_raw.get("path")),
            headers=_parse_headers(request_raw.get("headers"), "tcp.request.headers"),
        ),
        response=TcpResponse(
            version=_text(response_raw.get("version")),
            status=_text(response_raw.get("status")),
            reason=_text(response_raw.get("reason")),
            headers=_parse_headers(response_raw.get("headers"), "tcp.response.headers"),
        ),
    )

    ws_raw = _section(data, "web_socket")
    web_socket = WebSocketConfig(
        path=_text(ws_raw.get("path")),
        headers=_parse_headers(ws_raw.get("headers"), "web_socket.headers"),
    )

    kcp_raw = _section(data, "kcp")
    kcp = KcpConfig(
        type=_text(kcp_raw.get("type"), TCP_TYPE_NONE),
        mtu=_number(kcp_raw.get("mtu")),
        tti=_number(kcp_raw.get("tti")),
        uplink_capacity=_number(kcp_raw.get("uplink_capacity")),
        downlink_capacity=_number(kcp_raw.get("downlink_capacity")),
        congestion=_flag(kcp_raw.get("congestion")),
        read_buffer_size=_number(kcp_raw.get("read_buffer_size")),
        write_buffer_size=_number(kcp_raw.get("write_buffer_size")),
    )

    http2_raw = _section(data, "http2")
    http2 = Http2Config(
        host=_text(http2_raw.get("host")),
        path=_text(http2_raw.get("path")),
    )

    return SimplifiedConfig(
        clients=clients,
        v2ray_port=_number(data.get("v2ray_port")),
        transport_type=_number(data.get("transport_type")),
        tcp=tcp,
        web_socket=web_socket,
        kcp=kcp,
        http2=http2,
    )
