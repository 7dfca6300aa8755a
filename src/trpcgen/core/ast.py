from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import cast

from tree_sitter import Node, Tree
from tree_sitter_language_pack import SupportedLanguage, get_parser

from trpcgen.core.languages import detect_language_from_path, normalize_language

_VARIABLE_STATEMENTS = frozenset({"lexical_declaration", "variable_declaration"})
_CLASS_DECLARATIONS = frozenset({"class_declaration", "abstract_class_declaration"})
_TYPE_DECLARATIONS = frozenset(
    {"interface_declaration", "type_alias_declaration", "enum_declaration", *_CLASS_DECLARATIONS}
)
_FUNCTION_DECLARATIONS = frozenset({"function_declaration", "generator_function_declaration"})


def parse_source(source_bytes: bytes, language: str) -> Tree:
    parser = get_parser(cast(SupportedLanguage, language))
    return parser.parse(source_bytes)


def named_children(node: Node) -> list[Node]:
    """Named children of ``node`` without comments."""
    return [child for child in node.named_children if child.type != "comment"]


def field(node: Node, name: str) -> Node | None:
    return node.child_by_field_name(name)


def unquote(text: str) -> str:
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "'\"`":
        return text[1:-1]
    return text


@dataclass
class SourceFile:
    """A parsed TypeScript file and lookups over its top-level declarations."""

    path: Path
    source: bytes
    tree: Tree
    language: str

    @classmethod
    def from_text(cls, path: str | Path, text: str, language: str | None = None) -> SourceFile:
        file_path = Path(path)
        resolved_language = normalize_language(language) if language else detect_language_from_path(file_path)
        source_bytes = text.encode("utf-8")
        return cls(file_path, source_bytes, parse_source(source_bytes, resolved_language), resolved_language)

    @classmethod
    def from_path(cls, path: str | Path) -> SourceFile:
        file_path = Path(path)
        try:
            source_bytes = file_path.read_bytes()
        except FileNotFoundError:
            raise FileNotFoundError(f"File not found: {path}") from None
        language = detect_language_from_path(file_path)
        return cls(file_path, source_bytes, parse_source(source_bytes, language), language)

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def text(self, node: Node) -> str:
        return self.source[node.start_byte : node.end_byte].decode("utf-8")

    def splice(self, node: Node, edits: list[tuple[Node, str]]) -> str:
        """Return the text of ``node`` with each child span replaced by its rewrite."""
        parts: list[str] = []
        cursor = node.start_byte
        for child, replacement in sorted(edits, key=lambda edit: edit[0].start_byte):
            parts.append(self.source[cursor : child.start_byte].decode("utf-8"))
            parts.append(replacement)
            cursor = child.end_byte
        parts.append(self.source[cursor : node.end_byte].decode("utf-8"))
        return "".join(parts)

    def top_level_declarations(self) -> Iterator[Node]:
        """Yield top-level declarations, looking through ``export`` wrappers."""
        for statement in named_children(self.root):
            if statement.type == "export_statement":
                declaration = field(statement, "declaration")
                if declaration is not None:
                    yield declaration
            else:
                yield statement

    def export_statements(self) -> Iterator[Node]:
        for statement in named_children(self.root):
            if statement.type == "export_statement":
                yield statement

    def import_statements(self) -> Iterator[Node]:
        for statement in named_children(self.root):
            if statement.type == "import_statement":
                yield statement

    def get_variable_declaration(self, name: str) -> Node | None:
        for declaration in self.top_level_declarations():
            if declaration.type not in _VARIABLE_STATEMENTS:
                continue
            for declarator in named_children(declaration):
                if declarator.type != "variable_declarator":
                    continue
                declarator_name = field(declarator, "name")
                if declarator_name is not None and self.text(declarator_name) == name:
                    return declarator
        return None

    def _get_named(self, kinds: frozenset[str], name: str) -> Node | None:
        for declaration in self.top_level_declarations():
            if declaration.type not in kinds:
                continue
            declaration_name = field(declaration, "name")
            if declaration_name is not None and self.text(declaration_name) == name:
                return declaration
        return None

    def get_class(self, name: str) -> Node | None:
        return self._get_named(_CLASS_DECLARATIONS, name)

    def get_interface(self, name: str) -> Node | None:
        return self._get_named(frozenset({"interface_declaration"}), name)

    def get_type_alias(self, name: str) -> Node | None:
        return self._get_named(frozenset({"type_alias_declaration"}), name)

    def get_type_declaration(self, name: str) -> Node | None:
        return self._get_named(_TYPE_DECLARATIONS, name)

    def get_function(self, name: str) -> Node | None:
        return self._get_named(_FUNCTION_DECLARATIONS, name)

    def get_declaration(self, name: str) -> Node | None:
        """Any top-level declaration (variable, function or type) called ``name``."""
        return self.get_variable_declaration(name) or self.get_function(name) or self.get_type_declaration(name)

    def classes(self) -> Iterator[Node]:
        for declaration in self.top_level_declarations():
            if declaration.type in _CLASS_DECLARATIONS:
                yield declaration


def get_method(class_node: Node, name: str, source_file: SourceFile) -> Node | None:
    body = field(class_node, "body")
    if body is None:
        return None
    for member in named_children(body):
        if member.type != "method_definition":
            continue
        member_name = field(member, "name")
        if member_name is not None and source_file.text(member_name) == name:
            return member
    return None


def iter_methods(class_node: Node) -> Iterator[Node]:
    body = field(class_node, "body")
    if body is None:
        return
    for member in named_children(body):
        if member.type == "method_definition":
            yield member


def get_decorators(node: Node) -> list[Node]:
    """Decorators attached to a class or method declaration, in source order.

    Depending on the grammar position, decorators hang off the declaration
    itself, off a wrapping ``export`` statement (classes) or precede the method
    as siblings inside the class body.
    """
    decorators: list[Node] = []
    if node.parent is not None and node.parent.type == "export_statement":
        # The export statement's decorators are also the declaration's preceding siblings.
        decorators.extend(child for child in node.parent.named_children if child.type == "decorator")
    else:
        preceding: list[Node] = []
        sibling = node.prev_named_sibling
        while sibling is not None and sibling.type in ("decorator", "comment"):
            if sibling.type == "decorator":
                preceding.append(sibling)
            sibling = sibling.prev_named_sibling
        decorators.extend(reversed(preceding))

    decorators.extend(child for child in node.named_children if child.type == "decorator")
    return decorators


def decorator_call(decorator: Node) -> Node | None:
    for child in named_children(decorator):
        if child.type == "call_expression":
            return child
    return None


def decorator_name(decorator: Node, source_file: SourceFile) -> str:
    call = decorator_call(decorator)
    target = field(call, "function") if call is not None else named_children(decorator)[0]
    if target is not None and target.type == "member_expression":
        target = field(target, "property")
    return source_file.text(target) if target is not None else ""


def call_arguments(call: Node) -> list[Node]:
    arguments = field(call, "arguments")
    return named_children(arguments) if arguments is not None else []
