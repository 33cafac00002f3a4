"""Remote endpoint selection for producer and consumer spans.

Zipkin records the other side of a messaging interaction as the span's remote
endpoint. At most one candidate attribute is chosen, using a fixed rank
(lower wins):

0. ``peer.service``
1. ``net.peer.name``
2. ``net.peer.ip``
3. ``peer.hostname``
4. ``peer.address``
5. ``http.host``
6. ``db.name``

Attributes are scanned in input order and a candidate only replaces the
current best on a strictly lower rank, so the first of equally ranked
attributes wins.

A string-valued winner other than ``net.peer.ip`` becomes the endpoint's
service name. Otherwise the value is parsed as an IP literal; an unparsable
value means no remote endpoint at all (no fallback to a lower-ranked
candidate). The first ``net.peer.port`` attribute supplies the port, with
unparsable values yielding 0.

Public Functions:
    to_zipkin_remote_endpoint: Resolve the remote endpoint of a span, if any
"""
from __future__ import annotations

import ipaddress
import logging
import re
from types import MappingProxyType
from typing import Mapping, Optional, Sequence, Union

from ..models.otel import Attribute, SpanKind, SpanRecord
from ..models.zipkin import Endpoint
from .values import emit

logger = logging.getLogger(__name__)

__all__ = [
    "KEY_DB_NAME",
    "KEY_HTTP_HOST",
    "KEY_NET_PEER_IP",
    "KEY_NET_PEER_NAME",
    "KEY_NET_PEER_PORT",
    "KEY_PEER_ADDRESS",
    "KEY_PEER_HOSTNAME",
    "KEY_PEER_SERVICE",
    "REMOTE_ENDPOINT_KEY_RANK",
    "to_zipkin_remote_endpoint",
]

KEY_PEER_SERVICE = "peer.service"
KEY_NET_PEER_NAME = "net.peer.name"
KEY_NET_PEER_IP = "net.peer.ip"
KEY_NET_PEER_PORT = "net.peer.port"
KEY_HTTP_HOST = "http.host"
KEY_DB_NAME = "db.name"
# Not semantic conventions; recognised for compatibility with older tracers.
KEY_PEER_HOSTNAME = "peer.hostname"
KEY_PEER_ADDRESS = "peer.address"

REMOTE_ENDPOINT_KEY_RANK: Mapping[str, int] = MappingProxyType(
    {
        KEY_PEER_SERVICE: 0,
        KEY_NET_PEER_NAME: 1,
        KEY_NET_PEER_IP: 2,
        KEY_PEER_HOSTNAME: 3,
        KEY_PEER_ADDRESS: 4,
        KEY_HTTP_HOST: 5,
        KEY_DB_NAME: 6,
    }
)

_REMOTE_KINDS = frozenset({SpanKind.PRODUCER, SpanKind.CONSUMER})
_PORT_RE = re.compile(r"[0-9]+")
_MAX_PORT = 0xFFFF
_MAX_PORT_DIGITS = len(str(_MAX_PORT))


def _select_candidate(attributes: Sequence[Attribute]) -> Optional[Attribute]:
    best: Optional[Attribute] = None
    best_rank = len(REMOTE_ENDPOINT_KEY_RANK)
    for attr in attributes:
        rank = REMOTE_ENDPOINT_KEY_RANK.get(attr.key)
        if rank is None:
            continue
        if best is None or rank < best_rank:
            best, best_rank = attr, rank
    return best


def _parse_ip(value: str) -> Optional[Union[ipaddress.IPv4Address, ipaddress.IPv6Address]]:
    # zone-qualified literals are not valid endpoint addresses
    if "%" in value:
        return None
    try:
        ip = ipaddress.ip_address(value)
    except ValueError:
        return None
    if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped is not None:
        return ip.ipv4_mapped
    return ip


def _parse_port(raw: str) -> int:
    if not _PORT_RE.fullmatch(raw):
        return 0
    digits = raw.lstrip("0") or "0"
    if len(digits) > _MAX_PORT_DIGITS:
        return 0
    port = int(digits)
    return port if port <= _MAX_PORT else 0


def _peer_ip_endpoint(peer_ip: str, attributes: Sequence[Attribute]) -> Optional[Endpoint]:
    ip = _parse_ip(peer_ip)
    if ip is None:
        logger.debug("Remote endpoint skipped: %r is not an IP address", peer_ip)
        return None
    endpoint = Endpoint()
    if isinstance(ip, ipaddress.IPv4Address):
        endpoint.ipv4 = ip
    else:
        endpoint.ipv6 = ip
    for attr in attributes:
        if attr.key == KEY_NET_PEER_PORT:
            endpoint.port = _parse_port(emit(attr.value))
            return endpoint
    return endpoint


def to_zipkin_remote_endpoint(record: SpanRecord) -> Optional[Endpoint]:
    """Return the remote endpoint for producer/consumer spans, else None."""
    if record.span_kind not in _REMOTE_KINDS:
        return None

    winner = _select_candidate(record.attributes)
    if winner is None:
        return None

    if winner.key != KEY_NET_PEER_IP and isinstance(winner.value, str):
        return Endpoint(service_name=winner.value)

    # non-string values have no string form here and fail the IP parse
    peer_ip = winner.value if isinstance(winner.value, str) else ""
    return _peer_ip_endpoint(peer_ip, record.attributes)
