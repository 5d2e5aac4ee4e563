"""Input/output utilities for form documents and JSONL files."""

import json
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import jsonschema
from pydantic import ValidationError

from perseform.core.errors import FormDocumentError
from perseform.core.models import FormConfig, FormState


def read_jsonl(path: Path | str) -> Iterator[dict[str, Any]]:
    """Read a JSONL file and yield each record.

    Args:
        path: Path to the JSONL file.

    Yields:
        Each parsed JSON record.
    """
    with open(path) as f:
        for line_num, line in enumerate(f, 1):
            line = line.strip()
            if not line:
                continue
            try:
                yield json.loads(line)
            except json.JSONDecodeError as e:
                raise FormDocumentError(f"Invalid JSON on line {line_num}: {e}") from e


def write_jsonl(path: Path | str, records: Iterator[dict[str, Any]] | list[dict[str, Any]]) -> int:
    """Write records to a JSONL file.

    Returns:
        Number of records written.
    """
    count = 0
    with open(path, "w") as f:
        for record in records:
            f.write(json.dumps(record, ensure_ascii=False) + "\n")
            count += 1
    return count


def load_documents(path: Path | str) -> list[dict[str, Any]]:
    """Load form documents from a JSON or JSONL file.

    A ``.jsonl`` file yields one document per line. A JSON file may hold
    a single document or a list of them.

    Raises:
        FormDocumentError: If the file is missing or not valid JSON.
    """
    path = Path(path)
    if not path.exists():
        raise FormDocumentError(f"File not found: {path}")

    if path.suffix == ".jsonl":
        return list(read_jsonl(path))

    with open(path) as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise FormDocumentError(f"Invalid JSON in {path}: {e}") from e

    documents = data if isinstance(data, list) else [data]
    for document in documents:
        if not isinstance(document, dict):
            raise FormDocumentError(f"Expected a JSON object in {path}, got {type(document).__name__}")
    return documents


def form_config_schema() -> dict[str, Any]:
    """JSON schema for form config documents."""
    return FormConfig.model_json_schema(by_alias=True)


def validate_form_config_document(data: dict[str, Any]) -> FormConfig:
    """Validate a form config document and parse it.

    Raises:
        FormDocumentError: If the document fails schema or model validation.
    """
    try:
        jsonschema.validate(data, form_config_schema())
    except jsonschema.ValidationError as e:
        location = "/".join(str(part) for part in e.absolute_path) or "<root>"
        raise FormDocumentError(f"Form config validation failed at {location}: {e.message}") from e

    try:
        return FormConfig.model_validate(data)
    except ValidationError as e:
        raise FormDocumentError(f"Form config validation failed: {e}") from e


def parse_form_state_document(data: dict[str, Any]) -> FormState:
    """Parse a form state document.

    Raises:
        FormDocumentError: If the document is not a valid form state.
    """
    try:
        return FormState.model_validate(data)
    except ValidationError as e:
        raise FormDocumentError(f"Form state validation failed: {e}") from e
