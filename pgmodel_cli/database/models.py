"""Entity model produced by catalog extraction."""

from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field, fields


def _without_none(values: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in values.items() if v is not None}


@dataclass
class ColumnOptions:
    """Column options; ``None`` means the option is absent."""
    name: Optional[str] = None
    nullable: Optional[bool] = None
    unique: Optional[bool] = None
    array: Optional[bool] = None
    enum: Optional[List[str]] = None
    length: Optional[int] = None
    width: Optional[int] = None
    precision: Optional[int] = None
    scale: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        if values["enum"] is not None:
            values["enum"] = list(values["enum"])
        return _without_none(values)


@dataclass
class Column:
    """Represents a table column.

    ``tsc_type`` is the generic type (possibly a union of quoted enum
    literals or an array-suffixed type) and ``type`` the normalized
    storage type.
    """
    tsc_name: str
    tsc_type: str
    type: str
    options: ColumnOptions = field(default_factory=ColumnOptions)
    generated: Optional[bool] = None
    default: Optional[str] = None

    def __post_init__(self):
        if self.generated and self.default is not None:
            raise ValueError(f"Generated column '{self.tsc_name}' cannot carry a default value")

    def to_dict(self) -> Dict[str, Any]:
        return _without_none({
            "tscName": self.tsc_name,
            "tscType": self.tsc_type,
            "type": self.type,
            "generated": self.generated,
            "default": self.default,
            "options": self.options.to_dict(),
        })


@dataclass
class IndexOptions:
    unique: Optional[bool] = None


@dataclass
class Index:
    """Represents a named index or key constraint."""
    name: str
    columns: List[str] = field(default_factory=list)
    primary: Optional[bool] = None
    options: IndexOptions = field(default_factory=IndexOptions)

    @property
    def is_unique(self) -> bool:
        """Primary keys are unique whether or not the unique flag is set."""
        return bool(self.primary or self.options.unique)

    def to_dict(self) -> Dict[str, Any]:
        return _without_none({
            "name": self.name,
            "columns": list(self.columns),
            "primary": self.primary,
            "options": _without_none({"unique": self.options.unique}),
        })


@dataclass
class Relation:
    """A foreign-key relation between two entities.

    Entities are referenced by name so the same object can be attached
    to both the owning and the referenced entity.
    """
    owner_table: str
    related_table: str
    owner_columns: List[str]
    related_columns: List[str]
    relation_id: Optional[str] = None
    on_delete: Optional[str] = None
    on_update: Optional[str] = None

    def __post_init__(self):
        if not self.owner_columns or len(self.owner_columns) != len(self.related_columns):
            raise ValueError(
                f"Relation {self.owner_table} -> {self.related_table} needs matching, "
                f"non-empty column lists (got {self.owner_columns} / {self.related_columns})"
            )

    def other_side(self, entity_name: str) -> str:
        """Return the name of the entity on the opposite side."""
        if entity_name == self.owner_table:
            return self.related_table
        if entity_name == self.related_table:
            return self.owner_table
        raise KeyError(entity_name)

    def to_dict(self) -> Dict[str, Any]:
        return _without_none({
            "relationId": self.relation_id,
            "ownerTable": self.owner_table,
            "relatedTable": self.related_table,
            "ownerColumns": list(self.owner_columns),
            "relatedColumns": list(self.related_columns),
            "onDelete": self.on_delete,
            "onUpdate": self.on_update,
        })


@dataclass
class Entity:
    """Represents one base table."""
    name: str
    schema: str
    columns: List[Column] = field(default_factory=list)
    indices: List[Index] = field(default_factory=list)
    relations: List[Relation] = field(default_factory=list)
    relation_ids: List[str] = field(default_factory=list)

    def get_column(self, column_name: str) -> Optional[Column]:
        for column in self.columns:
            if column.tsc_name == column_name:
                return column
        return None

    def get_primary_key_columns(self) -> List[str]:
        """Columns of the primary key index, in index order."""
        for index in self.indices:
            if index.primary:
                return list(index.columns)
        return []

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "schema": self.schema,
            "columns": [c.to_dict() for c in self.columns],
            "indices": [i.to_dict() for i in self.indices],
            "relations": [r.to_dict() for r in self.relations],
            "relationIds": list(self.relation_ids),
        }


@dataclass
class RelationInternal:
    """Foreign-key group resolved against the entity set, before attachment."""
    owner_table: Entity
    related_table: Entity
    owner_columns: List[str] = field(default_factory=list)
    related_columns: List[str] = field(default_factory=list)
    relation_id: Optional[str] = None
    on_delete: Optional[str] = None
    on_update: Optional[str] = None

    def to_relation(self) -> Relation:
        return Relation(
            owner_table=self.owner_table.name,
            related_table=self.related_table.name,
            owner_columns=list(self.owner_columns),
            related_columns=list(self.related_columns),
            relation_id=self.relation_id,
            on_delete=self.on_delete,
            on_update=self.on_update,
        )


def find_entity(entities: List[Entity], name: str, schema: Optional[str] = None) -> Optional[Entity]:
    """Find an entity by table name, restricted to ``schema`` when given."""
    for entity in entities:
        if entity.name == name and (schema is None or entity.schema == schema):
            return entity
    return None
