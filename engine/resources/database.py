"""
Rules Database.

Handles loading and validation of static rules data (rule overrides,
skill definitions) from JSON files.
"""

import json
import logging
from pathlib import Path
from typing import Any, Mapping

import jsonschema


class DataValidationError(ValueError):
    """Raised when a rules data file is unreadable or fails its schema."""

    def __init__(self, source: Path | str, errors: list[str]):
        self.source = str(source)
        self.errors = list(errors)
        message = "; ".join(self.errors) if self.errors else "invalid document"
        super().__init__(f"{self.source}: {message}")


class Database:
    """
    Schema-checked access to JSON rules data under one directory.

    Whole documents (a rules override file) are validated strictly and
    raise on failure. Entry lists (a skills file) are validated per
    entry; bad entries are logged and skipped so one typo does not
    discard the rest of the catalog.
    """

    def __init__(self, data_path: Path | str = "."):
        self._data_path = Path(data_path)
        self._schemas: dict[str, Mapping[str, Any]] = {}
        self.logger = logging.getLogger(__name__)

    @property
    def data_path(self) -> Path:
        return self._data_path

    def register_schema(self, name: str, schema: Mapping[str, Any]) -> None:
        """Register a JSON Schema under a name."""
        jsonschema.Draft202012Validator.check_schema(schema)
        self._schemas[name] = schema

    def get_schema(self, name: str) -> Mapping[str, Any] | None:
        return self._schemas.get(name)

    def resolve(self, filename: Path | str) -> Path:
        path = Path(filename)
        if path.is_absolute():
            return path
        return self._data_path / path

    def read_json(self, filename: Path | str) -> Any:
        """
        Read a JSON file.

        Raises:
            DataValidationError: If the file is missing or not valid JSON
        """
        path = self.resolve(filename)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except OSError as e:
            self.logger.error(f"Failed to read {path}: {e}")
            raise DataValidationError(path, [f"cannot read file: {e}"]) from e
        except json.JSONDecodeError as e:
            self.logger.error(f"Invalid JSON in {path}: {e}")
            raise DataValidationError(path, [f"invalid JSON: {e.msg} (line {e.lineno})"]) from e

    def validate(self, data: Any, schema_name: str, source: Path | str) -> None:
        """
        Validate data against a registered schema.

        Raises:
            DataValidationError: Listing every schema violation
            KeyError: If the schema is not registered
        """
        schema = self._schemas.get(schema_name)
        if schema is None:
            raise KeyError(f"No schema registered as {schema_name!r}")

        validator = jsonschema.Draft202012Validator(schema)
        errors = sorted(validator.iter_errors(data), key=lambda e: list(e.path))
        if errors:
            messages = [self._format_error(e) for e in errors]
            self.logger.error(f"Validation error in {source}: {'; '.join(messages)}")
            raise DataValidationError(source, messages)

    def load_document(self, filename: Path | str, schema_name: str) -> dict[str, Any]:
        """Load one JSON object and validate it as a whole."""
        path = self.resolve(filename)
        data = self.read_json(path)
        self.validate(data, schema_name, path)
        self.logger.info(f"Loaded {schema_name} document from {path}")
        return data

    def load_entries(
        self,
        filename: Path | str,
        schema_name: str,
        list_key: str,
        id_key: str = "id",
    ) -> dict[str, dict[str, Any]]:
        """
        Load a list of entries, validating each one.

        Missing files yield an empty result with a warning. Entries
        that fail validation are skipped.
        """
        path = self.resolve(filename)
        if not path.exists():
            self.logger.warning(f"Data file not found: {path}")
            return {}

        data = self.read_json(path)
        entries = data.get(list_key, []) if isinstance(data, dict) else data
        if not isinstance(entries, list):
            raise DataValidationError(path, [f"'{list_key}' must be a list"])

        store: dict[str, dict[str, Any]] = {}
        for index, entry in enumerate(entries):
            try:
                self.validate(entry, schema_name, f"{path}[{index}]")
            except DataValidationError:
                continue
            store[entry[id_key]] = entry

        skipped = len(entries) - len(store)
        self.logger.info(f"Loaded {len(store)} {list_key} from {path} ({skipped} skipped)")
        return store

    @staticmethod
    def _format_error(error: jsonschema.ValidationError) -> str:
        location = "/".join(str(part) for part in error.path)
        if location:
            return f"{location}: {error.message}"
        return error.message
