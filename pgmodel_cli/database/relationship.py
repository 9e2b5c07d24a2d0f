"""Foreign-key relation building between extracted entities."""

import logging
from typing import Any, Dict, List, Optional

from .grouping import group_ordered
from .models import Entity, Relation, RelationInternal, find_entity

logger = logging.getLogger(__name__)


class RelationBuilder:
    """Groups raw foreign-key rows into relations and attaches them to entities.

    Each row describes one column pair of a foreign-key constraint and
    carries these keys:

    - ``object_id``: constraint identity (name, owner oid and referenced oid)
    - ``tableschema`` / ``tablewithforeignkey`` / ``foreignkeycolumn``: owning side
    - ``referencedschema`` / ``tablereferenced`` / ``foreignkeycolumnreferenced``:
      referenced side
    - ``fk_partno``: position of the pair within the constraint
    - ``ondelete`` / ``onupdate``: referential actions (optional)
    """

    def __init__(self, entities: List[Entity]):
        self.entities = entities

    def build(self, rows: List[Dict[str, Any]]) -> List[Relation]:
        """Build, attach and return all resolvable relations."""
        relations = []
        for internal in self.resolve(rows):
            relation = internal.to_relation()
            self._attach(internal, relation)
            relations.append(relation)

        logger.debug("Built %d relations from %d foreign-key rows", len(relations), len(rows))
        return relations

    def resolve(self, rows: List[Dict[str, Any]]) -> List[RelationInternal]:
        """Group rows by constraint identity and resolve both tables.

        Groups whose owner or referenced table is not in the entity set
        are dropped with a warning.
        """
        resolved = []
        for relation_id, group in group_ordered(rows, lambda row: row["object_id"]).items():
            internal = self._resolve_group(relation_id, group)
            if internal is not None:
                resolved.append(internal)
        return resolved

    def _resolve_group(self, relation_id: str, rows: List[Dict[str, Any]]) -> Optional[RelationInternal]:
        first = rows[0]
        owner_name = first["tablewithforeignkey"]
        related_name = first["tablereferenced"]

        owner_table = find_entity(self.entities, owner_name, first.get("tableschema"))
        related_table = find_entity(self.entities, related_name, first.get("referencedschema"))
        if owner_table is None or related_table is None:
            logger.warning(
                "Relation between tables %s and %s wasn't found in entity model.",
                owner_name,
                related_name,
            )
            return None

        internal = RelationInternal(
            owner_table=owner_table,
            related_table=related_table,
            relation_id=relation_id,
            on_delete=first.get("ondelete"),
            on_update=first.get("onupdate"),
        )
        seen_parts = set()
        for row in sorted(rows, key=self._part_number):
            part = self._part_key(row)
            if part in seen_parts:
                logger.debug("Skipping repeated column pair %s of relation %s", part, relation_id)
                continue
            seen_parts.add(part)
            internal.owner_columns.append(row["foreignkeycolumn"])
            internal.related_columns.append(row["foreignkeycolumnreferenced"])
        return internal

    @staticmethod
    def _part_number(row: Dict[str, Any]) -> int:
        part = row.get("fk_partno")
        return int(part) if part is not None else 0

    @staticmethod
    def _part_key(row: Dict[str, Any]):
        # One pair per constraint position; without a position, per column pair
        part = row.get("fk_partno")
        if part is not None:
            return int(part)
        return (row["foreignkeycolumn"], row["foreignkeycolumnreferenced"])

    @staticmethod
    def _attach(internal: RelationInternal, relation: Relation):
        owner = internal.owner_table
        related = internal.related_table

        owner.relations.append(relation)
        if relation.relation_id is not None:
            owner.relation_ids.append(relation.relation_id)
        # Self-references appear once
        if related is not owner:
            related.relations.append(relation)
