"""DocumentService façade - CRUD operations over a document store."""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel

from docservice.config import PaginateConfig, ServiceOptions
from docservice.core.events import SERVICE_EVENTS, ServiceEvent
from docservice.core.payload import ModifierExpression, Payload, Replacement, resolve_payload
from docservice.core.query import TranslatedQuery, get_limit, select_fields, translate_query
from docservice.core.validation import ValidationGate
from docservice.errors import BadRequest, ConfigurationError, NotFound, StoreError

logger = logging.getLogger(__name__)

STORE_ID = "_id"

Id = Union[str, int]
Record = dict[str, Any]


@dataclass
class Params:
    """Per-call parameters."""

    query: dict[str, Any] = field(default_factory=dict)
    store: dict[str, Any] = field(default_factory=dict)  # native options, e.g. {"upsert": True}
    paginate: Optional[Union[PaginateConfig, bool]] = None  # False disables pagination


class Page(BaseModel):
    """Paginated find result."""

    total: int
    limit: Optional[int] = None
    skip: int = 0
    data: list[dict[str, Any]]


class DocumentService:
    """Standard CRUD interface over a Datastore."""

    def __init__(self, options: Optional[ServiceOptions] = None) -> None:
        if options is None:
            raise ConfigurationError("Store options have to be provided")
        if options.model is None:
            raise ConfigurationError("Datastore `model` needs to be provided")
        if not isinstance(options.id_field, str) or not options.id_field or options.id_field.startswith("$"):
            raise ConfigurationError(f"Invalid identifier field: {options.id_field!r}")
        if options.schema is not None and options.validator is not None:
            raise ConfigurationError("Provide either a schema or a validator, not both")

        self.options = options
        self.model = options.model
        self.id_field = options.id_field
        self.paginate = options.paginate
        self.events = options.events
        self.path = options.path or options.model.name
        if options.validator is not None:
            self.gate = ValidationGate(options.validator)
        else:
            self.gate = ValidationGate.from_schema(options.schema)

        logger.info("Service %s ready (id field %s)", self.path, self.id_field)

    # --- helpers -------------------------------------------------------------

    def _externalize(self, doc: Mapping[str, Any]) -> Record:
        record = dict(doc)
        if self.id_field != STORE_ID:
            # The store's own key is internal when a custom id field is used
            record.pop(STORE_ID, None)
        return record

    def _match_id(self, filter: dict[str, Any], id: Id) -> dict[str, Any]:
        if self.id_field in filter:
            return {"$and": [filter, {self.id_field: id}]}
        return {**filter, self.id_field: id}

    def _with_id(self, record: Mapping[str, Any]) -> Record:
        doc = dict(record)
        if doc.get(self.id_field) is None:
            doc[self.id_field] = uuid.uuid4().hex
        return doc

    def _replacement(self, id: Id, fields: Mapping[str, Any]) -> Record:
        doc = {key: value for key, value in fields.items() if key not in (self.id_field, STORE_ID)}
        if self.id_field != STORE_ID:
            doc[self.id_field] = id
        return doc

    def _modifier(self, payload: Payload) -> Optional[dict[str, Any]]:
        if isinstance(payload, ModifierExpression):
            return payload.operators
        fields = {
            key: value
            for key, value in payload.fields.items()
            if key not in (self.id_field, STORE_ID)
        }
        return {"$set": fields} if fields else None

    def _get_paginate(self, params: Params) -> Optional[PaginateConfig]:
        if params.paginate is False:
            return None
        if isinstance(params.paginate, PaginateConfig):
            return params.paginate
        return self.paginate

    async def _fetch_ids(self, ids: list[Any], query: TranslatedQuery) -> list[Record]:
        if not ids:
            return []
        docs = await self.model.find({self.id_field: {"$in": ids}}, sort=query.sort)
        return [self._externalize(doc) for doc in docs]

    async def _insert_all(self, docs: list[Record]) -> None:
        """Insert docs as one unit: a failure part-way removes what this call wrote."""
        if not docs:
            return
        ids = [doc[self.id_field] for doc in docs]
        found = await self.model.find({self.id_field: {"$in": ids}}, projection={self.id_field: 1})
        existing = [doc.get(self.id_field) for doc in found]
        try:
            await self.model.insert(docs)
        except StoreError:
            written = [id for id in ids if id not in existing]
            logger.warning("Insert into %s failed, rolling back %d records", self.path, len(written))
            if written:
                await self.model.remove({self.id_field: {"$in": written}})
            raise

    async def _publish(self, event: str, records: list[Record]) -> None:
        if event not in SERVICE_EVENTS:
            raise ValueError(f"Unknown service event: {event}")
        if self.events is None:
            return
        for record in records:
            await self.events.publish(
                ServiceEvent(
                    type=f"{self.path}.{event}",
                    resource=self.path,
                    key=record.get(self.id_field),
                    payload=record,
                )
            )

    # --- operations ----------------------------------------------------------

    async def find(self, params: Optional[Params] = None) -> Union[list[Record], Page]:
        """
        Find records matching params.query.

        Returns:
            List of records, or a Page when pagination is active
        """
        params = params or Params()
        query = translate_query(params.query, self.id_field)
        paginate = self._get_paginate(params)
        limit = get_limit(query.limit, paginate)

        data: list[Record] = []
        if limit != 0:
            docs = await self.model.find(
                query.filter,
                projection=query.projection,
                sort=query.sort,
                skip=query.skip,
                limit=limit,
            )
            data = [select_fields(self._externalize(doc), query.select) for doc in docs]

        if paginate is None:
            return data

        total = await self.model.count(query.filter)
        return Page(total=total, limit=limit, skip=query.skip, data=data)

    async def get(self, id: Id, params: Optional[Params] = None) -> Record:
        """
        Get a single record by id.

        Raises:
            NotFound: If no record with that id matches params.query
        """
        params = params or Params()
        query = translate_query(params.query, self.id_field)
        docs = await self.model.find(
            self._match_id(query.filter, id), projection=query.projection, limit=1
        )
        if not docs:
            raise NotFound(f"No record found for id '{id}'")
        return select_fields(self._externalize(docs[0]), query.select)

    async def create(
        self, data: Union[Mapping[str, Any], list[Mapping[str, Any]]], params: Optional[Params] = None
    ) -> Union[Record, list[Record]]:
        """
        Create one record, or several in order when data is a list.

        Raises:
            BadRequest: If data is neither an object nor a list of objects
            ValidationError: If any record fails the schema
        """
        params = params or Params()
        query = translate_query(params.query, self.id_field)

        single = isinstance(data, Mapping)
        if single:
            records = [data]
        elif isinstance(data, list) and all(isinstance(item, Mapping) for item in data):
            records = data
        else:
            raise BadRequest("Data must be an object or a list of objects")

        self.gate.check_create(records)

        docs = [self._with_id(record) for record in records]
        await self._insert_all(docs)
        created = [self._externalize(doc) for doc in docs]
        logger.debug("Created %d records in %s", len(created), self.path)

        await self._publish("created", created)
        result = [select_fields(record, query.select) for record in created]
        return result[0] if single else result

    async def update(
        self, id: Optional[Id], data: Mapping[str, Any], params: Optional[Params] = None
    ) -> Record:
        """
        Replace the record at id, or apply a modifier expression to it.

        params.store["upsert"] creates the record when it does not exist.

        Raises:
            BadRequest: If id is None
            NotFound: If no record matches id and the query, and upsert is not
                requested or the id exists outside the query
        """
        if id is None:
            raise BadRequest("You can not replace multiple instances. Did you mean 'patch'?")

        params = params or Params()
        payload = resolve_payload(data)
        self.gate.check_update(payload)
        query = translate_query(params.query, self.id_field)

        exists = await self.model.count(self._match_id(query.filter, id))
        if exists:
            if isinstance(payload, Replacement):
                await self.model.replace({self.id_field: id}, self._replacement(id, payload.fields))
            else:
                await self.model.update({self.id_field: id}, payload.operators)
        elif params.store.get("upsert") and not (
            query.filter and await self.model.count({self.id_field: id})
        ):
            # an existing record outside the query filter is never duplicated
            logger.debug("Upserting %s into %s", id, self.path)
            if isinstance(payload, Replacement):
                await self.model.insert([{**self._replacement(id, payload.fields), self.id_field: id}])
            else:
                await self.model.insert([{self.id_field: id}])
                await self.model.update({self.id_field: id}, payload.operators)
        else:
            raise NotFound(f"No record found for id '{id}'")

        updated = await self._fetch_ids([id], query)
        await self._publish("updated", updated)
        return select_fields(updated[0], query.select)

    async def patch(
        self, id: Optional[Id], data: Mapping[str, Any], params: Optional[Params] = None
    ) -> Union[Record, list[Record]]:
        """
        Merge fields into the record at id, or apply a modifier expression.

        With id None every record matching params.query is patched.

        Raises:
            NotFound: If id is given and no record matches
        """
        params = params or Params()
        payload = resolve_payload(data)
        self.gate.check_patch(payload)
        query = translate_query(params.query, self.id_field)

        match = query.filter if id is None else self._match_id(query.filter, id)
        docs = await self.model.find(match, projection={self.id_field: 1}, sort=query.sort)
        ids = [doc[self.id_field] for doc in docs if self.id_field in doc]
        if id is not None and not ids:
            raise NotFound(f"No record found for id '{id}'")

        modifier = self._modifier(payload)
        if ids and modifier:
            await self.model.update({self.id_field: {"$in": ids}}, modifier)

        patched = await self._fetch_ids(ids, query)
        await self._publish("patched", patched)
        result = [select_fields(record, query.select) for record in patched]
        return result[0] if id is not None else result

    async def remove(
        self, id: Optional[Id], params: Optional[Params] = None
    ) -> Union[Record, list[Record]]:
        """
        Remove the record at id, or every record matching params.query when id is None.

        Raises:
            NotFound: If id is given and no record matches
        """
        params = params or Params()
        query = translate_query(params.query, self.id_field)

        match = query.filter if id is None else self._match_id(query.filter, id)
        docs = await self.model.find(match, sort=query.sort)
        removed = [self._externalize(doc) for doc in docs]
        if id is not None and not removed:
            raise NotFound(f"No record found for id '{id}'")

        ids = [record[self.id_field] for record in removed if self.id_field in record]
        if ids:
            await self.model.remove({self.id_field: {"$in": ids}})
        logger.debug("Removed %d records from %s", len(ids), self.path)

        await self._publish("removed", removed)
        result = [select_fields(record, query.select) for record in removed]
        return result[0] if id is not None else result

    async def close(self) -> None:
        await self.model.close()
