from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Protocol

from trpcgen.core.imports import ImportedDefinition


class SchemaImportInjector(Protocol):
    def add_schema_imports(
        self,
        target: Path,
        names: Iterable[str],
        import_map: Mapping[str, ImportedDefinition],
    ) -> None: ...

    def render(self, target: Path) -> list[str]: ...
