# travel_ledger/infrastructure/ledger/codec.py

import json
import logging
from typing import Dict, Iterable, Iterator, Tuple, Type, TypeVar

from pydantic import ValidationError as PydanticValidationError

from travel_ledger.domain.entities import (
    Booking,
    Customer,
    Entity,
    Payment,
    Provider,
    Ticket,
    TravelRecord,
)
from travel_ledger.domain.exceptions import SerializationError
from travel_ledger.infrastructure.ledger.ledger import KEY_SEPARATOR

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Entity)

DOC_TYPE_FIELD = "docType"

DOC_TYPES: Dict[Type[Entity], str] = {
    Provider: "provider",
    Customer: "customer",
    Ticket: "ticket",
    Booking: "booking",
    Payment: "payment",
    TravelRecord: "travel-record",
}


def doc_type_of(model: Type[Entity]) -> str:
    try:
        return DOC_TYPES[model]
    except KeyError:
        raise TypeError(f"{model.__name__} is not a ledger entity") from None


def key_for(model: Type[Entity], entity_id: str) -> str:
    return f"{doc_type_of(model)}{KEY_SEPARATOR}{entity_id}"


def key_range(model: Type[Entity]) -> Tuple[str, str]:
    """Start and end keys covering every record of one kind."""
    prefix = f"{doc_type_of(model)}{KEY_SEPARATOR}"
    return prefix, prefix[:-1] + chr(ord(KEY_SEPARATOR) + 1)


def encode(entity: Entity) -> bytes:
    document = entity.model_dump(mode="json", by_alias=True)
    document[DOC_TYPE_FIELD] = doc_type_of(type(entity))
    return json.dumps(document, sort_keys=True).encode("utf-8")


def decode(model: Type[E], value: bytes) -> E:
    try:
        document = json.loads(value)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise SerializationError(
            f"stored {doc_type_of(model)} is not valid JSON: {exc}"
        ) from exc

    if not isinstance(document, dict):
        raise SerializationError(f"stored {doc_type_of(model)} is not an object")

    stored_type = document.pop(DOC_TYPE_FIELD, None)
    if stored_type is not None and stored_type != doc_type_of(model):
        raise SerializationError(
            f"expected a {doc_type_of(model)} record, found {stored_type}"
        )

    try:
        return model.model_validate(document)
    except PydanticValidationError as exc:
        raise SerializationError(
            f"stored {doc_type_of(model)} is malformed: {exc}"
        ) from exc


def decode_each(model: Type[E], rows: Iterable[Tuple[str, bytes]]) -> Iterator[E]:
    """
    Best-effort decoding of a bulk read.
    A malformed record is logged and skipped; iteration continues.
    """
    for key, value in rows:
        try:
            yield decode(model, value)
        except SerializationError as exc:
            logger.warning("Skipping malformed record %s: %s", key, exc)
