from typing import ClassVar, Dict, Iterable, List, Sequence, Tuple, Type

from matte.domain.exceptions import SchemaException
from matte.domain.fields import Field, TypeTag
from matte.domain.schema import ID_FIELD, EntitySchema, FieldSpec


def field(name: str, type_tag: TypeTag) -> FieldSpec:
    """Declares a field in an Entity subclass body."""
    return FieldSpec(name=name, type_tag=type_tag)


class Entity:
    """
    Base class for schema-defined records.

    A kind is declared by subclassing and assigning `field(...)` specs as class
    attributes; the schema is built once per kind, with `id` first, and every
    instance gets one Field cell per schema position:

        class User(Entity):
            name = field("name", TypeTag.STRING)
            email = field("email", TypeTag.STRING)

        user = User()
        user.name.set("Jane")
    """

    __schema__: ClassVar[EntitySchema] = EntitySchema.declare("Entity", [])
    # Maps field name -> attribute name under which the cell is exposed
    __field_attributes__: ClassVar[Dict[str, str]] = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        parent = next(base for base in cls.__mro__[1:] if issubclass(base, Entity))

        attributes = dict(parent.__field_attributes__)
        declared = list(parent.__schema__.specs[1:])
        for attribute, value in vars(cls).items():
            if isinstance(value, FieldSpec):
                if attribute == ID_FIELD or attribute.startswith("_") or hasattr(Entity, attribute):
                    raise SchemaException(
                        f"Attribute '{attribute}' of entity kind {cls.__name__} cannot hold a field."
                    )
                attributes[value.name] = attribute
                declared.append(value)
        declared.extend(vars(cls).get("__declared_fields__", ()))

        cls.__schema__ = EntitySchema.declare(cls.__name__, declared)
        cls.__field_attributes__ = attributes

    def __init__(self):
        self._cells: Dict[str, Field] = {}
        self._declared = False
        schema = type(self).__schema__
        self.id = Field(ID_FIELD, TypeTag.INT64)
        self._cells[ID_FIELD] = self.id
        self.declare_fields([Field(spec.name, spec.type_tag) for spec in schema.specs[1:]])

    @classmethod
    def schema(cls) -> EntitySchema:
        return cls.__schema__

    @classmethod
    def define(cls, kind: str, fields: Sequence[Tuple[str, TypeTag]]) -> Type["Entity"]:
        """
        Creates an entity kind at runtime from (name, type) pairs.
        Cells of runtime kinds are reached with `entity["name"]`.
        """
        specs = tuple(FieldSpec(name=name, type_tag=type_tag) for name, type_tag in fields)
        return type(kind, (cls,), {"__declared_fields__": specs})

    def declare_fields(self, fields: Iterable[Field]) -> None:
        """
        Registers the kind's cells after `id`, in declaration order.
        Runs once, from the constructor.
        """
        if self._declared:
            raise SchemaException(f"Fields of {type(self).__name__} are already declared.")
        self._declared = True
        attributes = type(self).__field_attributes__
        for cell in fields:
            if cell.name in self._cells:
                raise SchemaException(f"Field '{cell.name}' declared twice in {type(self).__name__}.")
            self._cells[cell.name] = cell
            attribute = attributes.get(cell.name)
            if attribute is not None:
                setattr(self, attribute, cell)

    def fields_view(self) -> List[Field]:
        return list(self._cells.values())

    def __getitem__(self, name: str) -> Field:
        return self._cells[name]

    def __contains__(self, name: str) -> bool:
        return name in self._cells

    def __repr__(self) -> str:
        values = ", ".join(f"{cell.name}={cell.get()!r}" for cell in self._cells.values())
        return f"{type(self).__name__}({values})"
