import os
from pathlib import Path

from pydantic import BaseModel

_TRUTHY = {"1", "true", "yes", "on"}


class GeneratorOptions(BaseModel):
    root: Path = Path(".")
    output: Path | None = None
    auto_output_generation: bool = False
    schema_namespace: str = "z"

    @property
    def output_path(self) -> Path:
        return self.output if self.output is not None else self.root / "@generated" / "server.ts"


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


def load_options(**overrides: object) -> GeneratorOptions:
    """Build options from ``TRPCGEN_*`` environment variables; non-None overrides win."""
    values: dict[str, object] = {
        "auto_output_generation": _env_flag("TRPCGEN_AUTO_OUTPUT", False),
        "schema_namespace": os.getenv("TRPCGEN_SCHEMA_NAMESPACE", "z"),
    }
    values.update({key: value for key, value in overrides.items() if value is not None})
    return GeneratorOptions.model_validate(values)
