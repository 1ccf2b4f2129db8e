"""Static configuration tables, loaded once and passed explicitly.

- shared DTOs: endpoint name -> endpoints to borrow missing DTOs from
- schema overrides: "<endpoint>.<Dto>" -> schema fragment merged over the generated one
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from riotapi_schema.errors import ConfigError

DATA_DIR = Path(__file__).parent / "data"

SHARED_DTOS_FILE = DATA_DIR / "endpoint_shared_dtos.yaml"
SCHEMA_OVERRIDES_FILE = DATA_DIR / "schema_overrides.yaml"


class SchemaConfig(BaseModel):
    """Read-only configuration for the reconciler and renderers."""

    model_config = ConfigDict(frozen=True)

    shared_dtos: dict[str, tuple[str, ...]] = {}
    schema_overrides: dict[str, dict[str, Any]] = {}

    def fallback_endpoints(self, endpoint_name: str) -> tuple[str, ...]:
        return self.shared_dtos.get(endpoint_name, ())


def load_config(shared_dtos_path: Path | None = None, overrides_path: Path | None = None) -> SchemaConfig:
    """Load both tables, defaulting to the packaged data files."""
    try:
        return SchemaConfig(
            shared_dtos=_load_yaml(shared_dtos_path or SHARED_DTOS_FILE),
            schema_overrides=_load_yaml(overrides_path or SCHEMA_OVERRIDES_FILE),
        )
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration table: {e}") from e


def _load_yaml(path: Path) -> dict:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping, got {type(data).__name__}")
    return data
