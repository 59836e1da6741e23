from typing import Iterable, List, Tuple
from pydantic import BaseModel, ConfigDict, Field

from matte.domain.exceptions import SchemaException
from matte.domain.fields import TypeTag

ID_FIELD = "id"


class FieldSpec(BaseModel):
    """
    Static description of one field of an entity kind.
    Entity instances hold the values; a FieldSpec only says the field exists.
    """
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Field name, also the JSON key")
    type_tag: TypeTag = Field(..., description="Declared scalar type of the field")


class EntitySchema(BaseModel):
    """
    Ordered field set of an entity kind. The identifier field is always first.
    """
    model_config = ConfigDict(frozen=True)

    kind: str = Field(..., description="Name of the entity kind, e.g. 'User'")
    specs: Tuple[FieldSpec, ...] = Field(..., description="Field specs in declaration order")

    @classmethod
    def declare(cls, kind: str, declared: Iterable[FieldSpec]) -> "EntitySchema":
        """
        Builds a schema from the fields a kind declares, prepending the id field.

        Raises:
            SchemaException: if a field name is repeated or `id` is redeclared.
        """
        specs = [FieldSpec(name=ID_FIELD, type_tag=TypeTag.INT64)]
        seen = {ID_FIELD}
        for spec in declared:
            if spec.name == ID_FIELD:
                raise SchemaException(f"'{ID_FIELD}' is reserved in entity kind {kind}.")
            if spec.name in seen:
                raise SchemaException(f"Field '{spec.name}' declared twice in entity kind {kind}.")
            seen.add(spec.name)
            specs.append(spec)
        return cls(kind=kind, specs=tuple(specs))

    def names(self) -> List[str]:
        return [spec.name for spec in self.specs]

    def __len__(self) -> int:
        return len(self.specs)
