"""
Generic persistence for the record types.

A record service names its table, columns and unique key, then specializes
three hooks:

- ``prepare`` normalizes a full record before it is checked,
- ``validate`` returns field errors (allow-lists, references),
- ``populate`` expands references on the rows being returned.

Writes always go through ``prepare`` and ``validate`` on the complete record,
so PATCH re-validates the merged result the same way POST and PUT do.
"""

import logging
import re
import uuid
from datetime import datetime, timezone
from typing import Collection, Dict, List, Optional, Sequence, Type

import inflection
from fastapi import HTTPException
from postgrest.exceptions import APIError
from pydantic import BaseModel
from supabase import Client

from emis_party.config import Settings
from emis_party.core.exceptions import NotFoundError, ValidationFailed, field_error, translate_api_error
from emis_party.core.query import QueryOptions
from emis_party.core.schemas import ListResponse

logger = logging.getLogger(__name__)

TIMESTAMPS = ("created_at", "updated_at")

_SEARCH_UNSAFE = re.compile(r"[,()%*\\]")


def is_uuid(value) -> bool:
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True


def utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


class CrudService:
    table: str = ""
    model_name: str = ""
    response_model: Type[BaseModel] = BaseModel
    columns: Sequence[str] = ()
    required: Sequence[str] = ()
    array_columns: Sequence[str] = ()
    uuid_columns: Sequence[str] = ("id",)
    searchable: Sequence[str] = ()
    unique_fields: Sequence[str] = ()
    # reference column -> referenced table
    references: Dict[str, str] = {}

    def __init__(self, supabase: Client, settings: Settings):
        self.supabase = supabase
        self.settings = settings

    # Hooks

    def prepare(self, record: dict) -> dict:
        return record

    def validate(self, record: dict, record_id: Optional[str] = None) -> List[Dict[str, str]]:
        return []

    def populate(self, rows: List[dict]) -> List[dict]:
        return rows

    # Operations

    def create(self, data: BaseModel) -> BaseModel:
        """Validate and insert a new record"""
        record = self._check(data.model_dump(mode="json"))
        result = self._execute(self.supabase.table(self.table).insert(record))
        if not result.data:
            raise HTTPException(status_code=500, detail=f"Failed to create {self.model_name}")
        logger.debug("Created %s %s", self.model_name, result.data[0].get("id"))
        return self._respond(result.data[0])

    def get_by_id(self, record_id: str, options: Optional[QueryOptions] = None) -> BaseModel:
        return self._respond(self._find(record_id, self._select_clause(options)))

    def list(self, options: QueryOptions) -> ListResponse:
        """Page of records matching the options, with totals over the whole match"""
        query = self.supabase.table(self.table).select(self._select_clause(options), count="exact")
        query = self._apply_filters(query, options)
        for field, descending in options.sort_fields():
            query = query.order(self._column(field, "sort"), desc=descending)
        result = self._execute(query.range(options.skip, options.skip + options.limit - 1))

        rows = self.populate(result.data or [])
        total = result.count if result.count is not None else len(rows)
        return ListResponse[self.response_model](
            data=rows,
            total=total,
            size=len(rows),
            limit=options.limit,
            skip=options.skip,
            page=options.page,
            pages=options.pages(total),
            last_modified=self._last_modified(options),
        )

    def patch(self, record_id: str, data: BaseModel) -> BaseModel:
        """Merge the supplied fields into the stored record"""
        existing = self._find(record_id)
        changes = data.model_dump(mode="json", exclude_unset=True)
        merged = self._prune_references({**existing, **changes}, keep=changes)
        record = self._check(merged, record_id)
        return self._update(record_id, record)

    def put(self, record_id: str, data: BaseModel) -> BaseModel:
        """Replace every writable field of the stored record"""
        self._find(record_id, "id")
        record = self._check(data.model_dump(mode="json"), record_id)
        return self._update(record_id, record)

    def delete(self, record_id: str) -> BaseModel:
        self._find(record_id, "id")
        result = self._execute(self.supabase.table(self.table).delete().eq("id", record_id))
        if not result.data:
            raise NotFoundError()
        logger.debug("Deleted %s %s", self.model_name, record_id)
        return self._respond(result.data[0])

    def find_many(self, ids: Sequence[str]) -> Dict[str, dict]:
        """Populated rows keyed by id; unknown ids are left out."""
        ids = list(dict.fromkeys(i for i in ids if i and is_uuid(i)))
        if not ids:
            return {}
        result = self._execute(self.supabase.table(self.table).select("*").in_("id", ids))
        return {row["id"]: row for row in self.populate(result.data or [])}

    def check_references(self, field: str, table: str, ids: Sequence[str]) -> List[Dict[str, str]]:
        ids = list(dict.fromkeys(i for i in ids if i))
        if not ids:
            return []
        result = self._execute(self.supabase.table(table).select("id").in_("id", ids))
        found = {row["id"] for row in result.data or []}
        missing = [i for i in ids if i not in found]
        if not missing:
            return []
        return [field_error(
            inflection.camelize(field, False),
            f"Referenced {table} not found: {', '.join(missing)}",
            "reference_error",
        )]

    # Helpers

    @property
    def writable_columns(self) -> List[str]:
        return [c for c in self.columns if c != "id" and c not in TIMESTAMPS]

    def _execute(self, query):
        try:
            return query.execute()
        except APIError as e:
            raise translate_api_error(e, self.unique_fields)

    def _check(self, record: dict, record_id: Optional[str] = None) -> dict:
        record = self.prepare({c: record.get(c) for c in self.writable_columns})
        errors = [
            field_error(inflection.camelize(c, False), "Field required", "missing")
            for c in self.required
            if record.get(c) is None or record.get(c) == ""
        ]
        errors.extend(self.validate(record, record_id))
        if errors:
            raise ValidationFailed(errors)
        return record

    def _prune_references(self, record: dict, keep: Collection[str] = ()) -> dict:
        """Drop stored references that no longer resolve; columns in keep are left to validate."""
        for column, table in self.references.items():
            value = record.get(column)
            if column in keep or not value:
                continue
            ids = value if isinstance(value, list) else [value]
            result = self._execute(self.supabase.table(table).select("id").in_("id", ids))
            found = {row["id"] for row in result.data or []}
            if isinstance(value, list):
                record[column] = [i for i in value if i in found] or None
            elif value not in found:
                record[column] = None
        return record

    def _update(self, record_id: str, record: dict) -> BaseModel:
        record["updated_at"] = utcnow()
        result = self._execute(self.supabase.table(self.table).update(record).eq("id", record_id))
        if not result.data:
            raise NotFoundError()
        logger.debug("Updated %s %s", self.model_name, record_id)
        return self._respond(result.data[0])

    def _find(self, record_id: str, select: str = "*") -> dict:
        if not is_uuid(record_id):
            raise NotFoundError()
        result = self._execute(
            self.supabase.table(self.table).select(select).eq("id", record_id).limit(1)
        )
        if not result.data:
            raise NotFoundError()
        return result.data[0]

    def _respond(self, row: dict) -> BaseModel:
        return self.response_model(**self.populate([row])[0])

    def _column(self, field: str, option: str) -> str:
        column = inflection.underscore(field)
        if column not in self.columns:
            raise ValidationFailed(
                [field_error(field, f"Unknown {self.model_name} field", "unknown_field")],
                message=f"Invalid {option} option",
            )
        return column

    def _select_clause(self, options: Optional[QueryOptions]) -> str:
        if options is None or not options.select:
            return "*"
        columns = ["id"] + [self._column(f, "select") for f in options.select]
        return ",".join(dict.fromkeys(columns))

    def _apply_filters(self, query, options: QueryOptions):
        for field, value in options.filters.items():
            column = self._column(field, "filter")
            if column in self.uuid_columns and not is_uuid(value):
                raise ValidationFailed(
                    [field_error(field, "Invalid identifier", "uuid_parsing")],
                    message="Invalid filter option",
                )
            if column in self.array_columns:
                query = query.contains(column, [value])
            else:
                query = query.eq(column, value)
        term = _SEARCH_UNSAFE.sub(" ", options.q or "").strip()
        if term and self.searchable:
            query = query.or_(",".join(f"{c}.ilike.%{term}%" for c in self.searchable))
        return query

    def _last_modified(self, options: QueryOptions) -> Optional[str]:
        query = self._apply_filters(self.supabase.table(self.table).select("updated_at"), options)
        result = self._execute(query.order("updated_at", desc=True).limit(1))
        return result.data[0].get("updated_at") if result.data else None
