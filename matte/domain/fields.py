import re
from enum import Enum
from typing import Optional, Union

# Scalar values a field can hold; bool is checked before int everywhere
# because bool is a subclass of int.
Value = Union[str, int, bool]

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")

INT32_MIN, INT32_MAX = -(2 ** 31), 2 ** 31 - 1
INT64_MIN, INT64_MAX = -(2 ** 63), 2 ** 63 - 1


def parse_integer(raw: str, minimum: int, maximum: int) -> int:
    """
    Parses a signed decimal integer the strict way: optional sign, ASCII digits
    only, no whitespace or underscores, and within [minimum, maximum].

    Raises:
        ValueError: if the text is not such an integer.
    """
    if not _INTEGER_PATTERN.fullmatch(raw):
        raise ValueError(f"Not an integer: {raw!r}")
    number = int(raw)
    if number < minimum or number > maximum:
        raise ValueError(f"Integer out of range: {raw}")
    return number


class TypeTag(str, Enum):
    """Declared type of a field."""

    STRING = "string"
    INT32 = "int32"
    INT64 = "int64"
    BOOL = "bool"

    def accepts(self, value: Optional[Value]) -> bool:
        if value is None:
            return True
        if self is TypeTag.STRING:
            return isinstance(value, str)
        if self is TypeTag.BOOL:
            return isinstance(value, bool)
        if isinstance(value, bool) or not isinstance(value, int):
            return False
        if self is TypeTag.INT32:
            return INT32_MIN <= value <= INT32_MAX
        return INT64_MIN <= value <= INT64_MAX

    def parse(self, raw: str) -> Value:
        """
        Converts the raw text of a quoted JSON value into a value of this type.

        Raises:
            ValueError: if the text cannot represent a value of this type.
        """
        if self is TypeTag.STRING:
            return raw
        if self is TypeTag.INT32:
            return parse_integer(raw, INT32_MIN, INT32_MAX)
        if self is TypeTag.INT64:
            return parse_integer(raw, INT64_MIN, INT64_MAX)
        # Anything other than a case-insensitive "true" reads as false
        return raw.lower() == "true"


class Field:
    """
    A named, typed, mutable single-value cell.

    `set` does not check the value against the declared type; storing a
    mismatched value is a caller error.
    """

    __slots__ = ("_name", "_declared_type", "_value")

    def __init__(self, name: str, declared_type: TypeTag, value: Optional[Value] = None):
        self._name = name
        self._declared_type = declared_type
        self._value = value

    @property
    def name(self) -> str:
        return self._name

    @property
    def declared_type(self) -> TypeTag:
        return self._declared_type

    def get(self) -> Optional[Value]:
        return self._value

    def set(self, value: Optional[Value]) -> None:
        self._value = value

    def __repr__(self) -> str:
        return f"Field({self._name!r}, {self._declared_type.value}, {self._value!r})"
