"""Test JSON schema export for documents, wire messages and reports."""

import json
from pathlib import Path

import pytest

from scripts.export_schemas import main


def test_export_writes_all_schemas(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that every schema is exported and uses camelCase property names."""
    monkeypatch.chdir(tmp_path)
    main()

    schemas_dir = tmp_path / "docs" / "schemas"
    assert sorted(p.name for p in schemas_dir.iterdir()) == [
        "Document.schema.json",
        "FlexMessage.schema.json",
        "ValidationReport.schema.json",
    ]

    flex = json.loads((schemas_dir / "FlexMessage.schema.json").read_text())
    assert "altText" in flex["properties"]

    document = json.loads((schemas_dir / "Document.schema.json").read_text())
    assert "BubbleDoc" in document["$defs"]
    assert "bubbleSize" in document["$defs"]["BubbleDoc"]["properties"]
