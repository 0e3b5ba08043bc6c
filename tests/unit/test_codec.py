import json
from datetime import datetime, timezone

import pytest

from travel_ledger.domain.entities import Booking, Provider, Ticket, TransportMode
from travel_ledger.domain.exceptions import SerializationError
from travel_ledger.infrastructure.ledger import codec

DEPARTURE = datetime(2025, 3, 20, 6, 0, tzinfo=timezone.utc)
ARRIVAL = datetime(2025, 3, 20, 8, 0, tzinfo=timezone.utc)


def make_ticket() -> Ticket:
    return Ticket.create(
        ticket_id="T1",
        origin="Delhi",
        destination="Mumbai",
        departure_time=DEPARTURE,
        arrival_time=ARRIVAL,
        base_price=100.0,
        total_seats=3,
        provider_id="P1",
        transport_mode=TransportMode.AIR,
    )


def test_keys_are_prefixed_per_kind():
    assert codec.key_for(Ticket, "X1") == "ticket:X1"
    assert codec.key_for(Provider, "X1") == "provider:X1"
    assert codec.key_for(Booking, "X1") != codec.key_for(Ticket, "X1")


def test_key_range_covers_only_one_kind():
    start, end = codec.key_range(Ticket)
    assert start <= "ticket:T1" < end
    assert not (start <= "tickets" < end)
    assert not (start <= "travel-record:T1" < end)


def test_encoded_record_is_tagged_camel_case_json():
    document = json.loads(codec.encode(make_ticket()))

    assert document["docType"] == "ticket"
    assert document["providerId"] == "P1"
    assert document["dynamicPrice"] == 100.0
    assert document["departureTime"].startswith("2025-03-20T06:00:00")
    assert document["seats"][0] == {
        "id": "T1-seat-1",
        "number": "1",
        "status": "Vacant",
        "bookedBy": "",
    }


def test_decode_restores_entity():
    ticket = make_ticket()
    decoded = codec.decode(Ticket, codec.encode(ticket))

    assert decoded == ticket


def test_decode_ignores_unknown_fields():
    document = json.loads(codec.encode(make_ticket()))
    document["loyaltyTier"] = "gold"

    decoded = codec.decode(Ticket, json.dumps(document).encode())

    assert decoded.id == "T1"


def test_decode_rejects_other_kind():
    provider = Provider(id="P1", name="Skyline", transport_mode=TransportMode.AIR)

    with pytest.raises(SerializationError):
        codec.decode(Ticket, codec.encode(provider))


@pytest.mark.parametrize("value", [b"{broken", b"[1, 2]", b'{"id": "T1"}', b"\xff\xfe"])
def test_decode_rejects_malformed_bytes(value):
    with pytest.raises(SerializationError):
        codec.decode(Ticket, value)


def test_decode_each_skips_malformed_records():
    rows = [
        ("ticket:T1", codec.encode(make_ticket())),
        ("ticket:BAD", b"{broken"),
        ("ticket:T1", codec.encode(make_ticket())),
    ]

    decoded = list(codec.decode_each(Ticket, rows))

    assert [t.id for t in decoded] == ["T1", "T1"]
