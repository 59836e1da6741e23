import logging
from typing import Iterable, Optional

from matte.domain.models import Entity
from matte.domain.schema import ID_FIELD

logger = logging.getLogger(__name__)


def escape(text: str) -> str:
    # Only double quotes are escaped; backslashes and control characters pass through
    return text.replace('"', '\\"')


def extract_quoted_value(raw_json: str, key: str) -> Optional[str]:
    """
    Finds `"key"`, then the next colon, then returns the text between the next
    pair of double quotes. Returns None when any of those is missing.
    """
    key_index = raw_json.find(f'"{key}"')
    if key_index == -1:
        return None

    colon_index = raw_json.find(":", key_index)
    if colon_index == -1:
        return None

    value_start = raw_json.find('"', colon_index)
    if value_start == -1:
        return None
    value_start += 1

    value_end = raw_json.find('"', value_start)
    if value_end == -1:
        return None

    return raw_json[value_start:value_end]


class JsonCodec:
    """
    Hand-rolled JSON codec for flat entities.

    Serialization writes numbers and booleans as bare tokens, while
    deserialization only reads values written between double quotes
    (`"age":"42"`, as HTML form submissions send them). Bare values are
    not recognized and leave the field untouched.
    """

    @staticmethod
    def serialize(entity: Entity) -> str:
        """
        Renders the entity as a JSON object, keys in field declaration order.
        """
        members = []
        for cell in entity.fields_view():
            members.append(f'"{cell.name}":{JsonCodec._render_value(cell.get())}')
        return "{" + ",".join(members) + "}"

    @staticmethod
    def serialize_all(entities: Iterable[Entity]) -> str:
        return "[" + ",".join(JsonCodec.serialize(entity) for entity in entities) + "]"

    @staticmethod
    def deserialize(raw_json: str, target: Entity) -> Entity:
        """
        Copies every non-id value found in `raw_json` onto `target`.

        Never raises: missing keys and values that don't parse as the field's
        declared type leave that field as it was.

        Returns:
            Entity: the same `target` instance.
        """
        if raw_json is None:
            return target

        for cell in target.fields_view():
            if cell.name == ID_FIELD:
                continue

            raw_value = extract_quoted_value(raw_json, cell.name)
            if raw_value is None:
                continue

            try:
                cell.set(cell.declared_type.parse(raw_value))
            except ValueError as e:
                logger.debug(f"Skipping field '{cell.name}': {e}")

        return target

    @staticmethod
    def _render_value(value) -> str:
        if value is None:
            return "null"
        if isinstance(value, str):
            return f'"{escape(value)}"'
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)
