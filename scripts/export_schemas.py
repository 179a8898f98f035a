"""Export wire JSON schemas (camelCase) for the itinerary models and edit ops."""

import json
from pathlib import Path

from pydantic import BaseModel, TypeAdapter

from locallens.models import Activity, HotelRecommendation, Itinerary, ItineraryEdit

SCHEMAS_DIR = Path("docs/schemas")


def export_schemas(schemas_dir: Path = SCHEMAS_DIR) -> list[Path]:
    """Write one schema file per wire model and return the written paths."""
    schemas_dir.mkdir(parents=True, exist_ok=True)

    models: list[type[BaseModel]] = [Itinerary, Activity, HotelRecommendation]
    written: list[Path] = []

    for model in models:
        path = schemas_dir / f"{model.__name__}.schema.json"
        with open(path, "w") as f:
            json.dump(model.model_json_schema(by_alias=True), f, indent=2)
        written.append(path)

    edit_path = schemas_dir / "ItineraryEdit.schema.json"
    with open(edit_path, "w") as f:
        json.dump(TypeAdapter(ItineraryEdit).json_schema(), f, indent=2)
    written.append(edit_path)

    return written


def main() -> None:
    """Export schemas to docs/schemas/."""
    for path in export_schemas():
        print(f"Exported schema to {path}")


if __name__ == "__main__":
    main()
