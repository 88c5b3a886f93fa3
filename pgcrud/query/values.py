import json
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional

from pgcrud.core.errors import FieldConversionError


class FieldKind(str, Enum):
    NULL = "null"
    TEXT = "text"
    INTEGER = "integer"
    FLOAT = "float"
    NUMERIC = "numeric"
    BOOLEAN = "boolean"
    TEMPORAL = "temporal"
    JSON = "json"
    BYTES = "bytes"
    OTHER = "other"


@dataclass(frozen=True)
class FieldValue:
    """
    One column value of a result row, tagged with the kind psycopg returned.

    Nothing is converted implicitly: ask for the type you expect with the
    ``as_*`` methods, which raise FieldConversionError on a mismatch.
    """
    kind: FieldKind
    value: Any = None

    @classmethod
    def from_python(cls, value: Any) -> "FieldValue":
        if value is None:
            return cls(FieldKind.NULL)
        # bool before int: bool is an int subclass
        if isinstance(value, bool):
            return cls(FieldKind.BOOLEAN, value)
        if isinstance(value, int):
            return cls(FieldKind.INTEGER, value)
        if isinstance(value, float):
            return cls(FieldKind.FLOAT, value)
        if isinstance(value, Decimal):
            return cls(FieldKind.NUMERIC, value)
        if isinstance(value, str):
            return cls(FieldKind.TEXT, value)
        if isinstance(value, (datetime, date, time, timedelta)):
            return cls(FieldKind.TEMPORAL, value)
        if isinstance(value, (dict, list)):
            return cls(FieldKind.JSON, value)
        if isinstance(value, (bytes, bytearray, memoryview)):
            return cls(FieldKind.BYTES, bytes(value))
        return cls(FieldKind.OTHER, value)

    @property
    def is_null(self) -> bool:
        return self.kind is FieldKind.NULL

    def _fail(self, target: str) -> FieldConversionError:
        return FieldConversionError(f"Cannot convert {self.kind.value} field {self.value!r} to {target}")

    def as_text(self, coerce: bool = False) -> Optional[str]:
        if self.kind is FieldKind.TEXT:
            return self.value
        if not coerce:
            raise self._fail("text")
        if self.kind is FieldKind.NULL:
            return None
        if self.kind is FieldKind.TEMPORAL and not isinstance(self.value, timedelta):
            return self.value.isoformat()
        if self.kind is FieldKind.JSON:
            return json.dumps(self.value, ensure_ascii=False)
        if self.kind is FieldKind.BYTES:
            return self.value.hex()
        return str(self.value)

    def as_int(self) -> int:
        if self.kind is FieldKind.INTEGER:
            return self.value
        if self.kind in (FieldKind.FLOAT, FieldKind.NUMERIC):
            try:
                integral = int(self.value)
            except (ValueError, OverflowError):
                raise self._fail("integer")
            if integral == self.value:
                return integral
        raise self._fail("integer")

    def as_float(self) -> float:
        if self.kind in (FieldKind.INTEGER, FieldKind.FLOAT, FieldKind.NUMERIC):
            return float(self.value)
        raise self._fail("float")

    def as_decimal(self) -> Decimal:
        if self.kind is FieldKind.NUMERIC:
            return self.value
        if self.kind in (FieldKind.INTEGER, FieldKind.FLOAT):
            try:
                return Decimal(str(self.value))
            except InvalidOperation:
                raise self._fail("decimal")
        raise self._fail("decimal")

    def as_bool(self) -> bool:
        if self.kind is FieldKind.BOOLEAN:
            return self.value
        raise self._fail("boolean")
