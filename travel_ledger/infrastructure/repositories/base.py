# travel_ledger/infrastructure/repositories/base.py

import json
from typing import Any, Dict, Generic, Iterator, Optional, Type, TypeVar, Union

from travel_ledger.domain.entities import Entity
from travel_ledger.domain.exceptions import NotFoundError
from travel_ledger.infrastructure.ledger import codec
from travel_ledger.infrastructure.ledger.ledger import Ledger

E = TypeVar("E", bound=Entity)


class LedgerRepository(Generic[E]):
    """
    Typed access to one entity kind.

    Single-entity reads are strict: a missing record raises NotFoundError and
    a malformed one raises SerializationError. Bulk reads (iter_all, query)
    are lazy and skip malformed records.
    """

    model: Type[E]
    label: str

    def __init__(self, ledger: Ledger):
        self.ledger = ledger

    def key(self, entity_id: str) -> str:
        return codec.key_for(self.model, entity_id)

    def find(self, entity_id: str) -> Optional[E]:
        value = self.ledger.get(self.key(entity_id))
        if value is None:
            return None
        return codec.decode(self.model, value)

    def get(self, entity_id: str) -> E:
        entity = self.find(entity_id)
        if entity is None:
            raise NotFoundError(self.label, entity_id)
        return entity

    def exists(self, entity_id: str) -> bool:
        return self.ledger.get(self.key(entity_id)) is not None

    def save(self, entity: E) -> None:
        self.ledger.put(self.key(entity.id), codec.encode(entity))

    def delete(self, entity_id: str) -> None:
        self.ledger.delete(self.key(entity_id))

    def iter_all(self) -> Iterator[E]:
        start_key, end_key = codec.key_range(self.model)
        return codec.decode_each(self.model, self.ledger.range_scan(start_key, end_key))

    def query(self, query: Union[str, Dict[str, Any]]) -> Iterator[E]:
        return codec.decode_each(self.model, self.ledger.rich_query(query))

    def selector_query(self, selector: Dict[str, Any], index: Optional[str] = None) -> str:
        """
        Builds a query string for this kind.
        Values are JSON-encoded, so quotes in user input cannot break out.
        """
        document: Dict[str, Any] = {
            "selector": {codec.DOC_TYPE_FIELD: codec.doc_type_of(self.model), **selector},
        }
        if index:
            document["use_index"] = [index]
        return json.dumps(document)
