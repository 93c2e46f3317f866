"""
Row -> destination mapping.

Manifesto:
    Result rows are decoded the way ``sqlx`` scans into Go values: a single
    column fills a scalar, several columns fill the fields of a record whose
    field names are mapped to column names by a configurable function
    (lower-casing by default). A column without a matching field is an error
    rather than silently dropped.

Features:
    - Scalars (``int``, ``str``, ``Decimal``, ``datetime``...) from one column
    - ``dict`` and ``tuple`` rows
    - Dataclasses, with ``field(metadata={"db": "col"})`` overrides and
      ``"db": "-"`` to skip a field
    - Pydantic models, with field ``alias`` overrides
    - Plain annotated classes
    - In-place population of an existing record instance
    - Column maps cached per destination type

Examples:
    >>> from dataclasses import dataclass
    >>> @dataclass
    ... class User:
    ...     id: int
    ...     name: str
    >>> FieldMapper().map_row(User, ["id", "name"], (1, "leo"))
    User(id=1, name='leo')

Tags:
    mapping, reflection, dataclass, pydantic, easql
"""

from __future__ import annotations

import dataclasses
import datetime
import threading
from collections.abc import Callable, Sequence
from decimal import Decimal
from typing import Any

import pydantic

from .errors import MappingError

SCALAR_TYPES: tuple[type, ...] = (
    int,
    float,
    str,
    bytes,
    bool,
    Decimal,
    datetime.datetime,
    datetime.date,
    datetime.time,
    datetime.timedelta,
)

SKIP = "-"


def _is_scalar_type(dest: type) -> bool:
    return dest is object or issubclass(dest, SCALAR_TYPES)


def _is_pydantic_model(dest: type) -> bool:
    return issubclass(dest, pydantic.BaseModel)


class FieldMapper:
    """Map result columns onto destination types and instances.

    Args:
        name_func: Converts a record field name into its column name.
            Defaults to ``str.lower``.
    """

    def __init__(self, name_func: Callable[[str], str] | None = None):
        self._name_func = name_func or str.lower
        self._cache: dict[type, dict[str, str]] = {}
        self._lock = threading.Lock()

    def column_map(self, cls: type) -> dict[str, str]:
        """Return ``{column_name: attribute_name}`` for ``cls``."""
        cached = self._cache.get(cls)
        if cached is not None:
            return cached

        if dataclasses.is_dataclass(cls):
            mapping = {}
            for f in dataclasses.fields(cls):
                column = f.metadata.get("db") or self._name_func(f.name)
                if column != SKIP:
                    mapping[column] = f.name
        elif _is_pydantic_model(cls):
            mapping = {
                (info.alias or self._name_func(name)): name
                for name, info in cls.model_fields.items()
            }
        else:
            mapping = {}
            for klass in reversed(cls.__mro__):
                for name in getattr(klass, "__annotations__", {}):
                    if not name.startswith("_"):
                        mapping[self._name_func(name)] = name

        with self._lock:
            self._cache[cls] = mapping
        return mapping

    def map_row(self, dest: Any, columns: Sequence[str], row: Sequence[Any]) -> Any:
        """Decode one row into ``dest`` (a type, or an instance to populate)."""
        if isinstance(dest, type):
            return self._build(dest, columns, row)
        return self._populate(dest, columns, row)

    def map_rows(
        self, dest: type, columns: Sequence[str], rows: Sequence[Sequence[Any]]
    ) -> list[Any]:
        """Decode every row into a new ``dest`` value, preserving order."""
        if not isinstance(dest, type):
            raise MappingError(
                f"select destination must be a type, got {type(dest).__name__} instance"
            )
        return [self._build(dest, columns, row) for row in rows]

    # ------------------------------------------------------------------

    def _build(self, dest: type, columns: Sequence[str], row: Sequence[Any]) -> Any:
        if _is_scalar_type(dest):
            if len(columns) != 1:
                raise MappingError(
                    f"scannable dest type {dest.__name__} with >1 columns "
                    f"({len(columns)}) in result"
                )
            return _convert(dest, row[0])

        if issubclass(dest, dict):
            return dest(zip(columns, row))
        if dest is tuple:
            return tuple(row)

        values = self._attribute_values(dest, columns, row)
        try:
            if _is_pydantic_model(dest):
                model_fields = dest.model_fields
                return dest.model_validate(
                    {model_fields[name].alias or name: value for name, value in values.items()}
                )
            return dest(**values)
        except (TypeError, pydantic.ValidationError) as e:
            raise MappingError(f"cannot build {dest.__name__}: {e}", cause=e) from e

    def _populate(self, target: Any, columns: Sequence[str], row: Sequence[Any]) -> Any:
        if isinstance(target, SCALAR_TYPES):
            raise MappingError(
                f"cannot populate immutable {type(target).__name__}; pass the type instead"
            )
        if isinstance(target, dict):
            target.update(zip(columns, row))
            return target

        values = self._attribute_values(type(target), columns, row, instance=target)
        try:
            for attribute, value in values.items():
                setattr(target, attribute, value)
        except (AttributeError, TypeError, pydantic.ValidationError) as e:
            raise MappingError(
                f"cannot populate {type(target).__name__}: {e}", cause=e
            ) from e
        return target

    def _attribute_values(
        self,
        cls: type,
        columns: Sequence[str],
        row: Sequence[Any],
        instance: Any = None,
    ) -> dict[str, Any]:
        mapping = self.column_map(cls)
        if not mapping and instance is not None and hasattr(instance, "__dict__"):
            mapping = {self._name_func(name): name for name in vars(instance)}

        values = {}
        for column, value in zip(columns, row):
            attribute = mapping.get(column)
            if attribute is None:
                raise MappingError(f"missing destination name {column} in {cls.__name__}")
            values[attribute] = value
        return values


def _convert(dest: type, value: Any) -> Any:
    if value is None or dest is object or isinstance(value, dest):
        return value
    try:
        if dest is str and isinstance(value, (bytes, bytearray)):
            return value.decode()
        return dest(value)
    except (TypeError, ValueError, ArithmeticError) as e:
        raise MappingError(
            f"converting {type(value).__name__} to {dest.__name__}: {e}", cause=e
        ) from e


__all__ = [
    "FieldMapper",
    "SCALAR_TYPES",
]
