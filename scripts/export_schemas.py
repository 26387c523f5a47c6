"""Export JSON schemas for editor documents and the Flex Message wire format."""

import json
from pathlib import Path

from pydantic import TypeAdapter

from backend.app.models import FlexMessage, ValidationReport
from backend.app.models.document import Document


def main() -> None:
    """Export schemas to docs/schemas/."""
    schemas_dir = Path("docs/schemas")
    schemas_dir.mkdir(parents=True, exist_ok=True)

    # Export editor document schema (camelCase as stored)
    document_schema = TypeAdapter(Document).json_schema(by_alias=True)
    document_path = schemas_dir / "Document.schema.json"
    with open(document_path, "w") as f:
        json.dump(document_schema, f, indent=2)
    print(f"Exported Document schema to {document_path}")

    # Export wire message schema
    flex_schema = FlexMessage.model_json_schema(by_alias=True)
    flex_path = schemas_dir / "FlexMessage.schema.json"
    with open(flex_path, "w") as f:
        json.dump(flex_schema, f, indent=2)
    print(f"Exported FlexMessage schema to {flex_path}")

    # Export validation report schema
    report_schema = ValidationReport.model_json_schema()
    report_path = schemas_dir / "ValidationReport.schema.json"
    with open(report_path, "w") as f:
        json.dump(report_schema, f, indent=2)
    print(f"Exported ValidationReport schema to {report_path}")


if __name__ == "__main__":
    main()
