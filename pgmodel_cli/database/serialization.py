"""Serialization of the extracted entity model."""

import json
from typing import Any, Dict, List

from .models import Entity


def entities_to_dict(entities: List[Entity]) -> List[Dict[str, Any]]:
    return [entity.to_dict() for entity in entities]


def entities_to_json(entities: List[Entity], indent: int = 2) -> str:
    """Serialize entities to JSON. Relations reference entities by name."""
    return json.dumps(entities_to_dict(entities), indent=indent, default=str)
