from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List
import yaml

from .model import BuildingType, PlaceableOn, ResourceType
from .load import DATA_PATH, GenerationSchemaError


@dataclass
class BuildingDefinition:
    type: BuildingType
    name: str
    description: str
    placeable_on: PlaceableOn
    cost: Dict[ResourceType, float] = field(default_factory=dict)


class BuildingCatalog:
    """Static building definitions read by the placement layer; generation places nothing."""

    def __init__(self):
        self._definitions: Dict[BuildingType, BuildingDefinition] = {}

    def load_from_yaml(self, path: Path):
        with open(path, 'r') as f:
            data = yaml.safe_load(f)

        if data is None:
            raise GenerationSchemaError(f"YAML file '{path}' is empty or malformed.")

        for b_data in data:
            try:
                definition = BuildingDefinition(
                    type=BuildingType(b_data['id']),
                    name=b_data['name'],
                    description=b_data.get('description', ''),
                    placeable_on=PlaceableOn(b_data.get('placeable_on', PlaceableOn.LAND.value)),
                    cost={ResourceType(r_id): float(qty) for r_id, qty in b_data.get('cost', {}).items()},
                )
            except (KeyError, ValueError) as exc:
                raise GenerationSchemaError(f"Invalid building definition in {path}: {b_data}") from exc
            self._definitions[definition.type] = definition

    def get(self, building_type: BuildingType) -> BuildingDefinition:
        if building_type not in self._definitions:
            raise ValueError(f"Building '{building_type}' not found.")
        return self._definitions[building_type]

    def all_definitions(self) -> List[BuildingDefinition]:
        return list(self._definitions.values())

    def placeable_on(self, surface: PlaceableOn) -> List[BuildingDefinition]:
        return [d for d in self._definitions.values() if d.placeable_on == surface]


def load_building_catalog(path: Path = DATA_PATH / "buildings.yaml") -> BuildingCatalog:
    catalog = BuildingCatalog()
    catalog.load_from_yaml(path)
    return catalog
