"""Saved column mappings, so a bank's export layout only has to be mapped once."""

from typing import Dict, Optional

from models.column_mapping import ColumnMapping

MAPPINGS_KEY = "saved-column-mappings"


class MappingService:
    """Service for named column mappings."""

    def __init__(self, settings):
        self.settings = settings

    def find_all(self) -> Dict[str, ColumnMapping]:
        """Get all saved mappings keyed by name, in the order they were saved."""
        return {
            saved["name"]: ColumnMapping.from_dict(saved["mapping"])
            for saved in self.settings.get(MAPPINGS_KEY, [])
        }

    def find(self, name: str) -> Optional[ColumnMapping]:
        return self.find_all().get(name)

    def save(self, name: str, mapping: ColumnMapping) -> None:
        """Save a mapping under name, replacing a mapping with the same name."""
        name = name.strip()
        if not name:
            raise ValueError("Mapping name cannot be empty")

        saved = [s for s in self.settings.get(MAPPINGS_KEY, []) if s["name"] != name]
        saved.append({"name": name, "mapping": mapping.to_dict()})
        self.settings.set(MAPPINGS_KEY, saved)

    def delete(self, name: str) -> bool:
        saved = self.settings.get(MAPPINGS_KEY, [])
        remaining = [s for s in saved if s["name"] != name]
        if len(remaining) == len(saved):
            return False

        self.settings.set(MAPPINGS_KEY, remaining)
        return True
