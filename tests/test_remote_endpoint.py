from __future__ import annotations

from datetime import datetime, timezone
from ipaddress import IPv4Address, IPv6Address

import pytest

from otel_zipkin_shipper.mapper import REMOTE_ENDPOINT_KEY_RANK
from otel_zipkin_shipper.mapping.remote_endpoint import to_zipkin_remote_endpoint
from otel_zipkin_shipper.models.otel import Attribute, SpanKind, SpanRecord

T0 = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def _record(kind: SpanKind, *pairs) -> SpanRecord:
    return SpanRecord(
        trace_id=bytes(range(1, 17)),
        span_id=bytes(range(1, 9)),
        name="op",
        span_kind=kind,
        start_time=T0,
        end_time=T0,
        attributes=[Attribute(key=k, value=v) for k, v in pairs],
    )


def test_rank_table_order():
    ordered = sorted(REMOTE_ENDPOINT_KEY_RANK, key=REMOTE_ENDPOINT_KEY_RANK.get)
    assert ordered == [
        "peer.service",
        "net.peer.name",
        "net.peer.ip",
        "peer.hostname",
        "peer.address",
        "http.host",
        "db.name",
    ]


def test_rank_table_is_read_only():
    with pytest.raises(TypeError):
        REMOTE_ENDPOINT_KEY_RANK["custom"] = -1  # type: ignore[index]


def test_peer_service_outranks_earlier_net_peer_name():
    ep = to_zipkin_remote_endpoint(
        _record(SpanKind.PRODUCER, ("net.peer.name", "svcA"), ("peer.service", "svcB"))
    )
    assert ep is not None
    assert ep.service_name == "svcB"
    assert ep.ipv4 is None and ep.ipv6 is None and ep.port == 0


def test_first_of_equal_rank_wins():
    ep = to_zipkin_remote_endpoint(
        _record(SpanKind.CONSUMER, ("db.name", "first"), ("db.name", "second"))
    )
    assert ep.service_name == "first"


@pytest.mark.parametrize(
    "key", ["peer.hostname", "peer.address", "http.host", "db.name", "net.peer.name"]
)
def test_single_string_candidate_becomes_service_name(key):
    ep = to_zipkin_remote_endpoint(_record(SpanKind.PRODUCER, (key, "remote")))
    assert ep.service_name == "remote"


def test_ipv4_with_port():
    ep = to_zipkin_remote_endpoint(
        _record(SpanKind.CONSUMER, ("net.peer.ip", "192.0.2.1"), ("net.peer.port", "8080"))
    )
    assert ep is not None
    assert ep.ipv4 == IPv4Address("192.0.2.1")
    assert ep.ipv6 is None
    assert ep.port == 8080
    assert ep.service_name == ""


def test_ipv6_with_int_port():
    ep = to_zipkin_remote_endpoint(
        _record(SpanKind.PRODUCER, ("net.peer.port", 9092), ("net.peer.ip", "2001:db8::1"))
    )
    assert ep.ipv6 == IPv6Address("2001:db8::1")
    assert ep.ipv4 is None
    assert ep.port == 9092


def test_ipv4_mapped_ipv6_classified_as_ipv4():
    ep = to_zipkin_remote_endpoint(_record(SpanKind.PRODUCER, ("net.peer.ip", "::ffff:192.0.2.7")))
    assert ep.ipv4 == IPv4Address("192.0.2.7")
    assert ep.ipv6 is None


def test_ip_without_port_leaves_port_zero():
    ep = to_zipkin_remote_endpoint(_record(SpanKind.PRODUCER, ("net.peer.ip", "10.0.0.1")))
    assert ep.ipv4 == IPv4Address("10.0.0.1")
    assert ep.port == 0


@pytest.mark.parametrize("port", ["http", "-1", "70000", "", " 80", True])
def test_unparsable_port_yields_zero(port):
    ep = to_zipkin_remote_endpoint(
        _record(SpanKind.PRODUCER, ("net.peer.ip", "10.0.0.1"), ("net.peer.port", port))
    )
    assert ep is not None
    assert ep.port == 0


def test_huge_port_string_yields_zero():
    ep = to_zipkin_remote_endpoint(
        _record(SpanKind.PRODUCER, ("net.peer.ip", "10.0.0.1"), ("net.peer.port", "9" * 5000))
    )
    assert ep is not None
    assert ep.port == 0


def test_zero_padded_port_parsed():
    ep = to_zipkin_remote_endpoint(
        _record(SpanKind.PRODUCER, ("net.peer.ip", "10.0.0.1"), ("net.peer.port", "0000080"))
    )
    assert ep.port == 80


def test_first_port_attribute_wins():
    ep = to_zipkin_remote_endpoint(
        _record(
            SpanKind.PRODUCER,
            ("net.peer.port", "bad"),
            ("net.peer.ip", "10.0.0.1"),
            ("net.peer.port", "443"),
        )
    )
    assert ep.port == 0


def test_invalid_ip_abandons_endpoint():
    assert to_zipkin_remote_endpoint(_record(SpanKind.PRODUCER, ("net.peer.ip", "not-an-ip"))) is None


def test_invalid_ip_does_not_fall_back_to_lower_rank():
    assert (
        to_zipkin_remote_endpoint(
            _record(SpanKind.PRODUCER, ("db.name", "orders"), ("net.peer.ip", "999.1.1.1"))
        )
        is None
    )


def test_zone_qualified_ipv6_rejected():
    assert to_zipkin_remote_endpoint(_record(SpanKind.PRODUCER, ("net.peer.ip", "fe80::1%eth0"))) is None


def test_non_string_winner_yields_no_endpoint():
    assert to_zipkin_remote_endpoint(_record(SpanKind.PRODUCER, ("peer.service", 123))) is None


@pytest.mark.parametrize(
    "kind", [SpanKind.SERVER, SpanKind.CLIENT, SpanKind.INTERNAL, SpanKind.UNSPECIFIED]
)
def test_only_producer_and_consumer_get_remote_endpoint(kind):
    assert to_zipkin_remote_endpoint(_record(kind, ("peer.service", "x"))) is None


def test_no_ranked_attribute_yields_none():
    assert to_zipkin_remote_endpoint(_record(SpanKind.CONSUMER, ("net.peer.port", "80"))) is None
