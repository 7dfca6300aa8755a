"""Inline every user-defined reference in a schema-builder expression.

The flattened text of a node is its own source span with each rewritten
child spliced in at the child's byte range. Rewrites are keyed by node
position, never by text search, so two children with identical text are
rewritten independently and every child slot is visited exactly once.
Inside any other expression (arrow functions, casts, conditionals) the
outermost call expressions are flattened, which reaches every nested call.
"""

from __future__ import annotations

import logging
from pathlib import Path

from tree_sitter import Node

from trpcgen.core.ast import SourceFile, field, named_children
from trpcgen.core.imports import ImportsScanner
from trpcgen.core.ports.injector import SchemaImportInjector

logger = logging.getLogger(__name__)

_Resolving = frozenset[tuple[Path, int]]


def _outermost_calls(node: Node) -> list[Node]:
    calls: list[Node] = []
    for child in named_children(node):
        if child.type == "call_expression":
            calls.append(child)
        else:
            calls.extend(_outermost_calls(child))
    return calls


class SchemaFlattener:
    def __init__(
        self,
        imports_scanner: ImportsScanner,
        import_injector: SchemaImportInjector,
        output_path: Path,
        schema_namespace: str = "z",
    ) -> None:
        self._imports = imports_scanner
        self._injector = import_injector
        self._output_path = output_path
        self._namespace = schema_namespace

    def flatten(self, node: Node, source_file: SourceFile, window: str | None = None) -> str:
        """Return the self-contained text of ``node``.

        When ``window`` is given, the node's original text inside it is
        replaced by the flattened text and the updated window is returned.
        """
        flattened = self._flatten(node, source_file, frozenset())
        if window is None:
            return flattened
        return window.replace(source_file.text(node), flattened, 1)

    def is_builder_reference(self, text: str) -> bool:
        return text == self._namespace or text.startswith(f"{self._namespace}.")

    def _flatten(self, node: Node, source_file: SourceFile, resolving: _Resolving) -> str:
        kind = node.type
        if kind in ("identifier", "shorthand_property_identifier"):
            return self._flatten_reference(source_file.text(node), source_file, resolving)
        if kind == "object":
            return self._flatten_object(node, source_file, resolving)
        if kind == "array":
            return self._flatten_array(node, source_file, resolving)
        if kind == "call_expression":
            return self._flatten_call(node, source_file, resolving)
        if kind == "member_expression":
            return self._flatten_member(node, source_file, resolving)
        return self._flatten_nested_calls(node, source_file, resolving)

    def _flatten_reference(self, name: str, source_file: SourceFile, resolving: _Resolving) -> str:
        resolved = self._resolve(name, source_file)
        if resolved is None:
            return name
        initializer, origin = resolved
        key = (origin.path, initializer.start_byte)
        if key in resolving:
            logger.debug("Self-referencing schema %r in %s left as-is", name, origin.path)
            return name
        return self._flatten(initializer, origin, resolving | {key})

    def _resolve(self, name: str, source_file: SourceFile) -> tuple[Node, SourceFile] | None:
        declarator = source_file.get_variable_declaration(name)
        if declarator is not None:
            initializer = field(declarator, "value")
            return (initializer, source_file) if initializer is not None else None

        imported = self._imports.build_import_map(source_file).get(name)
        if imported is not None and imported.initializer is not None:
            return imported.initializer, imported.source_file
        return None

    def _flatten_object(self, node: Node, source_file: SourceFile, resolving: _Resolving) -> str:
        edits: list[tuple[Node, str]] = []
        for member in named_children(node):
            if member.type == "pair":
                value = field(member, "value")
                if value is not None:
                    edits.append((value, self._flatten(value, source_file, resolving)))
            elif member.type == "shorthand_property_identifier":
                name = source_file.text(member)
                flattened = self._flatten_reference(name, source_file, resolving)
                if flattened != name:
                    edits.append((member, f"{name}: {flattened}"))
            elif member.type == "spread_element":
                edits.extend(self._flatten_spread(member, source_file, resolving))
        return source_file.splice(node, edits)

    def _flatten_array(self, node: Node, source_file: SourceFile, resolving: _Resolving) -> str:
        edits: list[tuple[Node, str]] = []
        for element in named_children(node):
            if element.type == "spread_element":
                edits.extend(self._flatten_spread(element, source_file, resolving))
            else:
                edits.append((element, self._flatten(element, source_file, resolving)))
        return source_file.splice(node, edits)

    def _flatten_spread(self, node: Node, source_file: SourceFile, resolving: _Resolving) -> list[tuple[Node, str]]:
        return [(argument, self._flatten(argument, source_file, resolving)) for argument in named_children(node)]

    def _flatten_call(self, node: Node, source_file: SourceFile, resolving: _Resolving) -> str:
        edits: list[tuple[Node, str]] = []
        callee = field(node, "function")
        if callee is not None:
            if callee.type == "member_expression":
                # Nested calls in the base resolve first, deepest-first.
                edits.append((callee, self._flatten_member(callee, source_file, resolving)))
            elif callee.type == "identifier":
                if not self.is_builder_reference(source_file.text(callee)):
                    self._register_factory(source_file.text(callee), source_file)
            else:
                edits.append((callee, self._flatten(callee, source_file, resolving)))

        arguments = field(node, "arguments")
        if arguments is not None and arguments.type == "arguments":
            for argument in named_children(arguments):
                edits.append((argument, self._flatten(argument, source_file, resolving)))
        return source_file.splice(node, edits)

    def _flatten_member(self, node: Node, source_file: SourceFile, resolving: _Resolving) -> str:
        base = field(node, "object")
        if base is None:
            return source_file.text(node)
        return source_file.splice(node, [(base, self._flatten(base, source_file, resolving))])

    def _flatten_nested_calls(self, node: Node, source_file: SourceFile, resolving: _Resolving) -> str:
        """Arrow bodies, ``as`` casts, ternaries and the like: flatten the calls inside them."""
        edits = [(call, self._flatten_call(call, source_file, resolving)) for call in _outermost_calls(node)]
        return source_file.splice(node, edits)

    def _register_factory(self, name: str, source_file: SourceFile) -> None:
        """External factory calls stay as calls; the generated file imports the factory instead."""
        logger.debug("Keeping factory call %r from %s", name, source_file.path)
        self._injector.add_schema_imports(self._output_path, [name], self._imports.build_import_map(source_file))
