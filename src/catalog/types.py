"""
Skill entities returned by the standardized skills catalog.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class SkillEntity:
    """
    A canonical skill from the catalog.

    Identity is the catalog id only. The catalog may hold distinct skills
    with near-identical names, so two entities are equal iff their ids are.
    """

    id: str
    name: str = field(compare=False)
    category: Optional[str] = field(default=None, compare=False)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "SkillEntity":
        """Build from an API record; `category` is either a name or an object."""
        category = data.get("category")
        if isinstance(category, dict):
            category = category.get("name")
        return cls(id=str(data["id"]), name=data["name"], category=category or None)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "category": self.category}
