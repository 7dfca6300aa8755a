from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from tree_sitter import Node

from trpcgen.core.ast import SourceFile, field, named_children, unquote
from trpcgen.core.project import Project

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class ImportedDefinition:
    """Where an imported identifier is actually declared."""

    name: str
    declaration: Node
    source_file: SourceFile
    # ``export default <expression>``: the declaration is the value itself.
    is_expression: bool = False

    @property
    def initializer(self) -> Node | None:
        if self.is_expression:
            return self.declaration
        if self.declaration.type == "variable_declarator":
            return field(self.declaration, "value")
        return None


ImportMap = dict[str, ImportedDefinition]


class ImportsScanner:
    """Build per-file import maps, following re-exports through barrel files."""

    def __init__(self, project: Project) -> None:
        self._project = project
        self._cache: dict[Path, ImportMap] = {}

    def build_import_map(self, source_file: SourceFile) -> ImportMap:
        cached = self._cache.get(source_file.path)
        if cached is not None:
            return cached

        import_map: ImportMap = {}
        for statement in source_file.import_statements():
            source_node = field(statement, "source")
            if source_node is None:
                continue
            specifier = unquote(source_file.text(source_node))
            target = self._project.resolve_module(source_file, specifier)
            if target is None:
                continue
            for local_name, exported_name in self._imported_names(statement, source_file):
                definition = self.resolve_export(target, exported_name)
                if definition is None:
                    logger.debug("%s does not export %r", target.path, exported_name)
                    continue
                import_map[local_name] = definition

        self._cache[source_file.path] = import_map
        return import_map

    def _imported_names(self, statement: Node, source_file: SourceFile) -> list[tuple[str, str]]:
        """Return ``(local_name, exported_name)`` pairs for an import statement."""
        names: list[tuple[str, str]] = []
        for clause in named_children(statement):
            if clause.type != "import_clause":
                continue
            for child in named_children(clause):
                if child.type == "identifier":
                    names.append((source_file.text(child), "default"))
                elif child.type == "named_imports":
                    for specifier in named_children(child):
                        if specifier.type != "import_specifier":
                            continue
                        name_node = field(specifier, "name")
                        alias_node = field(specifier, "alias")
                        if name_node is None:
                            continue
                        exported = source_file.text(name_node)
                        local = source_file.text(alias_node) if alias_node is not None else exported
                        names.append((local, exported))
                elif child.type == "namespace_import":
                    logger.debug("Skipping namespace import in %s", source_file.path)
        return names

    def resolve_export(
        self,
        source_file: SourceFile,
        name: str,
        _seen: frozenset[tuple[Path, str]] = frozenset(),
    ) -> ImportedDefinition | None:
        key = (source_file.path, name)
        if key in _seen:
            return None
        seen = _seen | {key}

        if name == "default":
            return self._resolve_default_export(source_file)

        for statement in source_file.export_statements():
            clause = next((c for c in named_children(statement) if c.type == "export_clause"), None)
            source_node = field(statement, "source")
            if clause is not None:
                for specifier in named_children(clause):
                    if specifier.type != "export_specifier":
                        continue
                    local_node = field(specifier, "name")
                    alias_node = field(specifier, "alias")
                    if local_node is None:
                        continue
                    local = source_file.text(local_node)
                    exported = source_file.text(alias_node) if alias_node is not None else local
                    if exported != name:
                        continue
                    if source_node is not None:
                        target = self._project.resolve_module(source_file, unquote(source_file.text(source_node)))
                        return self.resolve_export(target, local, seen) if target is not None else None
                    return self._local_definition(source_file, local)

        definition = self._local_definition(source_file, name)
        if definition is not None:
            return definition

        for statement in source_file.export_statements():
            source_node = field(statement, "source")
            is_star = any(child.type == "*" for child in statement.children)
            has_clause = any(c.type in ("export_clause", "namespace_export") for c in named_children(statement))
            if source_node is None or not is_star or has_clause:
                continue
            target = self._project.resolve_module(source_file, unquote(source_file.text(source_node)))
            if target is None:
                continue
            definition = self.resolve_export(target, name, seen)
            if definition is not None:
                return definition
        return None

    def _resolve_default_export(self, source_file: SourceFile) -> ImportedDefinition | None:
        for statement in source_file.export_statements():
            if not any(child.type == "default" for child in statement.children):
                continue
            declaration = field(statement, "declaration")
            if declaration is not None:
                return ImportedDefinition("default", declaration, source_file)
            value = field(statement, "value")
            if value is None:
                continue
            if value.type == "identifier":
                return self._local_definition(source_file, source_file.text(value))
            return ImportedDefinition("default", value, source_file, is_expression=True)
        return None

    @staticmethod
    def _local_definition(source_file: SourceFile, name: str) -> ImportedDefinition | None:
        declaration = source_file.get_declaration(name)
        if declaration is None:
            return None
        return ImportedDefinition(name, declaration, source_file)
