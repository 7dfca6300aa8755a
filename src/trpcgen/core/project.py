from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path

from trpcgen.core.ast import SourceFile
from trpcgen.core.languages import MODULE_RESOLUTION_SUFFIXES, is_source_path

logger = logging.getLogger(__name__)

_SKIPPED_DIRECTORIES = frozenset({"node_modules", "dist", "@generated"})


def _normalize(path: str | Path) -> Path:
    return Path(os.path.normpath(Path(path).absolute()))


class Project:
    """Registry of parsed source files for a single generation run.

    Each file is parsed on first access and cached by its absolute path.
    The cache lives exactly as long as the ``Project`` instance.
    """

    def __init__(self, root: str | Path = ".") -> None:
        self.root = _normalize(root)
        self._files: dict[Path, SourceFile] = {}

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str | Path) and self._resolve(path) in self._files

    def create_source_file(self, path: str | Path, text: str, overwrite: bool = True) -> SourceFile:
        """Register in-memory source text under ``path`` (relative paths are taken from the root)."""
        resolved = self._resolve(path)
        if resolved in self._files and not overwrite:
            raise FileExistsError(f"Source file already registered: {resolved}")
        source_file = SourceFile.from_text(resolved, text)
        self._files[resolved] = source_file
        return source_file

    def get_source_file(self, path: str | Path) -> SourceFile:
        resolved = self._resolve(path)
        source_file = self._files.get(resolved)
        if source_file is None:
            logger.debug("Parsing %s", resolved)
            source_file = SourceFile.from_path(resolved)
            self._files[resolved] = source_file
        return source_file

    def resolve_module(self, from_file: SourceFile, specifier: str) -> SourceFile | None:
        """Resolve a relative module specifier the way the TypeScript compiler does for ``.ts`` sources.

        Package imports (``zod``, ``@nestjs/common``) are never part of the project and resolve to ``None``.
        """
        if not specifier.startswith("."):
            return None
        base = _normalize(from_file.path.parent / specifier)
        candidates = [base] if is_source_path(base) else []
        candidates.extend(Path(f"{base}{suffix}") for suffix in MODULE_RESOLUTION_SUFFIXES)
        for candidate in candidates:
            if candidate in self._files:
                return self._files[candidate]
            if candidate.is_file():
                return self.get_source_file(candidate)
        logger.debug("Could not resolve module %r from %s", specifier, from_file.path)
        return None

    def iter_source_paths(self) -> Iterator[Path]:
        if not self.root.is_dir():
            raise FileNotFoundError(f"Project root not found: {self.root}")
        for dirpath, dirnames, filenames in os.walk(self.root):
            dirnames[:] = sorted(d for d in dirnames if d not in _SKIPPED_DIRECTORIES and not d.startswith("."))
            for filename in sorted(filenames):
                path = Path(dirpath) / filename
                if is_source_path(path):
                    yield path

    def source_files(self) -> Iterator[SourceFile]:
        for path in self.iter_source_paths():
            yield self.get_source_file(path)

    def _resolve(self, path: str | Path) -> Path:
        candidate = Path(path)
        if not candidate.is_absolute():
            candidate = self.root / candidate
        return _normalize(candidate)
