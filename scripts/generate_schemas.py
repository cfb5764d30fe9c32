"""Generate the JSON schema of the descriptor document and save it to schemas/."""

import json
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from compdesc.kernel.component import Component
from compdesc.kernel.schema import SCHEMA_VERSION


def generate_schemas():
    """Generate the JSON schema of the current descriptor version."""
    schemas_dir = Path(__file__).parent.parent / "schemas"
    schemas_dir.mkdir(exist_ok=True)

    schema = Component.model_json_schema(by_alias=True, mode="serialization")
    schema["$comment"] = f"component descriptor schema version {SCHEMA_VERSION}"
    schema_path = schemas_dir / "component_descriptor.schema.json"
    with open(schema_path, 'w', encoding='utf-8') as f:
        json.dump(schema, f, indent=2, ensure_ascii=False)
    print(f"Generated: {schema_path}")

    print("\nSchema generation complete!")


if __name__ == "__main__":
    generate_schemas()
