"""Static parts of the generated app router module and its schema imports."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping
from pathlib import Path

from trpcgen.core.imports import ImportedDefinition

logger = logging.getLogger(__name__)

_TS_SUFFIXES = (".tsx", ".ts")


def module_specifier(target: Path, origin: Path) -> str:
    """Relative import specifier for ``origin`` as seen from the file ``target``."""
    origin_text = str(origin)
    for suffix in _TS_SUFFIXES:
        if origin_text.endswith(suffix):
            origin_text = origin_text[: -len(suffix)]
            break
    relative = os.path.relpath(origin_text, Path(target).parent).replace(os.sep, "/")
    return relative if relative.startswith(".") else f"./{relative}"


class ImportInjector:
    """Collects the imports a generated file needs, grouped by module specifier.

    Implements the ``SchemaImportInjector`` protocol.
    """

    def __init__(self) -> None:
        self._imports: dict[Path, dict[str, list[tuple[str, str]]]] = {}

    def add_schema_imports(
        self,
        target: Path,
        names: Iterable[str],
        import_map: Mapping[str, ImportedDefinition],
    ) -> None:
        for name in names:
            imported = import_map.get(name)
            if imported is None:
                logger.debug("No import found for %r, leaving reference as-is", name)
                continue
            specifier = module_specifier(target, imported.source_file.path)
            bucket = self._imports.setdefault(Path(target), {}).setdefault(specifier, [])
            entry = (imported.name, name)
            if entry not in bucket:
                bucket.append(entry)

    def render(self, target: Path) -> list[str]:
        lines: list[str] = []
        for specifier, entries in self._imports.get(Path(target), {}).items():
            names = ", ".join(local if exported == local else f"{exported} as {local}" for exported, local in entries)
            lines.append(f'import {{ {names} }} from "{specifier}";')
        return lines


def render_app_router(routers: str, imports: Iterable[str] = (), schema_namespace: str = "z") -> str:
    zod_import = "z" if schema_namespace == "z" else f"z as {schema_namespace}"
    header = [
        'import { initTRPC } from "@trpc/server";',
        f'import {{ {zod_import} }} from "zod";',
        *imports,
    ]
    body = [
        "const t = initTRPC.create();",
        "const publicProcedure = t.procedure;",
        "",
        f"const appRouter = t.router({{{routers}}});",
        "export type AppRouter = typeof appRouter;",
    ]
    return "\n".join(header) + "\n\n" + "\n".join(body) + "\n"
