"""Build type descriptors from declared TypeScript type annotations.

Only what is written in the source is used: inferred types are not
reconstructed and resolve to ``UnknownType``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import get_args

from tree_sitter import Node

from trpcgen.core.ast import SourceFile, field, named_children
from trpcgen.core.imports import ImportsScanner
from trpcgen.models import (
    ArrayType,
    IntersectionType,
    LiteralType,
    ObjectType,
    PrimitiveName,
    PrimitiveType,
    PromiseType,
    PropertyDescriptor,
    TypeDescriptor,
    UnionType,
    UnknownType,
)

logger = logging.getLogger(__name__)

_PRIMITIVES: frozenset[str] = frozenset(get_args(PrimitiveName))
_ARRAY_GENERICS = frozenset({"Array", "ReadonlyArray"})
_CALLABLE_TYPES = frozenset({"function_type", "constructor_type"})
_WRAPPER_TYPES = frozenset({"parenthesized_type", "readonly_type"})
_TYPE_DECLARATIONS = frozenset(
    {
        "interface_declaration",
        "type_alias_declaration",
        "enum_declaration",
        "class_declaration",
        "abstract_class_declaration",
    }
)

_Resolving = frozenset[tuple[Path, int]]


def _annotated_type(annotation: Node | None) -> Node | None:
    """The type inside a ``: T`` annotation."""
    if annotation is None:
        return None
    children = named_children(annotation)
    return children[0] if children else None


def _is_optional(member: Node) -> bool:
    return any(child.type == "?" for child in member.children)


def _is_static(member: Node) -> bool:
    return any(child.type == "static" for child in member.children)


def _callable() -> ObjectType:
    return ObjectType(is_callable=True)


def _enum(name: str, declaration: Node, source_file: SourceFile) -> TypeDescriptor:
    """Union of the member values; members without an initializer count up from the previous number."""
    body = field(declaration, "body")
    values: list[TypeDescriptor] = []
    next_value: int | None = 0
    for member in named_children(body) if body is not None else []:
        if member.type != "enum_assignment":
            if next_value is None:
                return UnknownType(text=name)
            values.append(LiteralType(value=str(next_value)))
            next_value += 1
            continue

        value = field(member, "value")
        if value is None or value.type not in ("number", "string"):
            logger.debug("Computed member in enum %r left untyped", name)
            return UnknownType(text=name)
        text = source_file.text(value)
        values.append(LiteralType(value=text))
        next_value = int(text) + 1 if value.type == "number" and text.isdigit() else None

    if not values:
        return UnknownType(text=name)
    return values[0] if len(values) == 1 else UnionType(members=values)


class TypeResolver:
    def __init__(self, imports_scanner: ImportsScanner) -> None:
        self._imports = imports_scanner

    def return_type(self, method: Node, source_file: SourceFile) -> TypeDescriptor:
        """Descriptor for a method's declared return type; unannotated methods are unknown."""
        annotation = field(method, "return_type")
        if annotation is not None and annotation.type == "type_predicate_annotation":
            return PrimitiveType(name="boolean")
        return self.resolve(_annotated_type(annotation), source_file)

    def resolve(self, type_node: Node | None, source_file: SourceFile) -> TypeDescriptor:
        if type_node is None:
            return UnknownType()
        return self._resolve(type_node, source_file, frozenset())

    def _resolve(self, node: Node, source_file: SourceFile, resolving: _Resolving) -> TypeDescriptor:
        kind = node.type
        text = source_file.text(node)

        if kind in ("predefined_type", "literal_type"):
            if text in _PRIMITIVES:
                return PrimitiveType(name=text)  # type: ignore[arg-type]
            return LiteralType(value=text) if kind == "literal_type" else UnknownType(text=text)
        if kind in _WRAPPER_TYPES:
            inner = named_children(node)
            return self._resolve(inner[-1], source_file, resolving) if inner else UnknownType(text=text)
        if kind == "array_type":
            return ArrayType(element=self._resolve(named_children(node)[0], source_file, resolving))
        if kind == "union_type":
            return UnionType(members=self._operands(node, source_file, resolving))
        if kind == "intersection_type":
            return IntersectionType(members=self._operands(node, source_file, resolving))
        if kind in _CALLABLE_TYPES:
            return _callable()
        if kind == "object_type":
            properties, is_callable = self._members(node, source_file, resolving)
            return ObjectType(properties=properties, is_callable=is_callable)
        if kind == "type_identifier":
            return self._resolve_reference(text, source_file, resolving)
        if kind == "generic_type":
            return self._resolve_generic(node, source_file, resolving)
        return UnknownType(text=text)

    def _operands(self, node: Node, source_file: SourceFile, resolving: _Resolving) -> list[TypeDescriptor]:
        """Left-to-right operands of ``a | b | c``, which the grammar nests as ``(a | b) | c``."""
        operands: list[TypeDescriptor] = []
        for child in named_children(node):
            if child.type == node.type:
                operands.extend(self._operands(child, source_file, resolving))
            else:
                operands.append(self._resolve(child, source_file, resolving))
        return operands

    def _resolve_generic(self, node: Node, source_file: SourceFile, resolving: _Resolving) -> TypeDescriptor:
        name_node = field(node, "name")
        arguments_node = field(node, "type_arguments")
        name = source_file.text(name_node) if name_node is not None else ""
        arguments = named_children(arguments_node) if arguments_node is not None else []

        if name in _ARRAY_GENERICS and arguments:
            return ArrayType(element=self._resolve(arguments[0], source_file, resolving))
        if name == "Promise" and arguments:
            return PromiseType(inner=self._resolve(arguments[0], source_file, resolving))
        if name_node is not None and name_node.type == "type_identifier":
            # Type parameters of user generics are not substituted.
            return self._resolve_reference(name, source_file, resolving)
        return UnknownType(text=source_file.text(node))

    def _resolve_reference(self, name: str, source_file: SourceFile, resolving: _Resolving) -> TypeDescriptor:
        declaration = source_file.get_type_declaration(name)
        origin = source_file
        if declaration is None:
            imported = self._imports.build_import_map(source_file).get(name)
            if imported is not None and imported.declaration.type in _TYPE_DECLARATIONS:
                declaration, origin = imported.declaration, imported.source_file
        if declaration is None:
            logger.debug("Unresolved type reference %r in %s", name, source_file.path)
            return UnknownType(text=name)

        key = (origin.path, declaration.start_byte)
        if key in resolving:
            logger.debug("Recursive type %r in %s", name, origin.path)
            return UnknownType(text=name)
        nested = resolving | {key}

        if declaration.type == "type_alias_declaration":
            value = field(declaration, "value")
            return self._resolve(value, origin, nested) if value is not None else UnknownType(text=name)
        if declaration.type == "interface_declaration":
            return self._interface(name, declaration, origin, nested)
        if declaration.type == "enum_declaration":
            return _enum(name, declaration, origin)
        return self._class(name, declaration, origin, nested)

    def _interface(self, name: str, declaration: Node, source_file: SourceFile, resolving: _Resolving) -> ObjectType:
        body = field(declaration, "body")
        properties, is_callable = self._members(body, source_file, resolving) if body is not None else ([], False)
        declared = {prop.name for prop in properties}

        for clause in named_children(declaration):
            if clause.type != "extends_type_clause":
                continue
            for base_node in named_children(clause):
                base = self._resolve(base_node, source_file, resolving)
                if not isinstance(base, ObjectType):
                    continue
                is_callable = is_callable or base.is_callable
                for prop in base.properties:
                    if prop.name not in declared:
                        declared.add(prop.name)
                        properties.append(prop)

        return ObjectType(name=name, properties=properties, is_callable=is_callable)

    def _class(self, name: str, declaration: Node, source_file: SourceFile, resolving: _Resolving) -> ObjectType:
        properties: list[PropertyDescriptor] = []
        body = field(declaration, "body")
        for member in named_children(body) if body is not None else []:
            if _is_static(member):
                continue
            member_name = field(member, "name")
            if member_name is None:
                continue
            if member.type == "public_field_definition":
                prop_type = self._annotation(field(member, "type"), member, source_file, resolving)
                properties.append(PropertyDescriptor(name=source_file.text(member_name), type=prop_type))
            elif member.type == "method_definition":
                properties.append(PropertyDescriptor(name=source_file.text(member_name), type=_callable()))
        return ObjectType(name=name, properties=properties)

    def _members(
        self, body: Node, source_file: SourceFile, resolving: _Resolving
    ) -> tuple[list[PropertyDescriptor], bool]:
        """Properties of an object type or interface body, plus whether it has a call signature."""
        properties: list[PropertyDescriptor] = []
        is_callable = False
        for member in named_children(body):
            if member.type == "call_signature":
                is_callable = True
                continue
            member_name = field(member, "name")
            if member_name is None:
                continue
            if member.type == "property_signature":
                prop_type = self._annotation(field(member, "type"), member, source_file, resolving)
                properties.append(PropertyDescriptor(name=source_file.text(member_name), type=prop_type))
            elif member.type == "method_signature":
                properties.append(PropertyDescriptor(name=source_file.text(member_name), type=_callable()))
        return properties, is_callable

    def _annotation(
        self, annotation: Node | None, member: Node, source_file: SourceFile, resolving: _Resolving
    ) -> TypeDescriptor:
        type_node = _annotated_type(annotation)
        prop_type = self._resolve(type_node, source_file, resolving) if type_node is not None else UnknownType()
        if _is_optional(member):
            return UnionType(members=[prop_type, PrimitiveType(name="undefined")])
        return prop_type
