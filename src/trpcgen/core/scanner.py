import logging

from tree_sitter import Node

from trpcgen.core.ast import (
    SourceFile,
    call_arguments,
    decorator_call,
    decorator_name,
    field,
    get_decorators,
    iter_methods,
    named_children,
    unquote,
)
from trpcgen.core.project import Project
from trpcgen.models import ProcedureKind, ProcedureMetadata, RouterMetadata

logger = logging.getLogger(__name__)

ROUTER_DECORATOR = "Router"
_PROCEDURE_KINDS = frozenset(kind.value for kind in ProcedureKind)


def _router_alias(decorator: Node, source_file: SourceFile) -> str | None:
    call = decorator_call(decorator)
    arguments = call_arguments(call) if call is not None else []
    if not arguments or arguments[0].type != "object":
        return None
    for member in named_children(arguments[0]):
        if member.type != "pair":
            continue
        key = field(member, "key")
        value = field(member, "value")
        if key is not None and value is not None and unquote(source_file.text(key)) == "alias":
            return unquote(source_file.text(value))
    return None


def _procedure_kind(method: Node, source_file: SourceFile) -> ProcedureKind | None:
    for decorator in get_decorators(method):
        name = decorator_name(decorator, source_file)
        if name in _PROCEDURE_KINDS:
            return ProcedureKind(name)
    return None


class RouterScanner:
    """Discover ``@Router()`` classes and their ``@Query``/``@Mutation`` methods."""

    def __init__(self, project: Project) -> None:
        self._project = project

    def scan(self) -> list[RouterMetadata]:
        routers: list[RouterMetadata] = []
        for source_file in self._project.source_files():
            routers.extend(self.scan_source_file(source_file))
        logger.info("Found %d router(s) under %s", len(routers), self._project.root)
        return routers

    def scan_source_file(self, source_file: SourceFile) -> list[RouterMetadata]:
        routers: list[RouterMetadata] = []
        for class_node in source_file.classes():
            router_decorator = next(
                (d for d in get_decorators(class_node) if decorator_name(d, source_file) == ROUTER_DECORATOR),
                None,
            )
            name_node = field(class_node, "name")
            if router_decorator is None or name_node is None:
                continue

            procedures: list[ProcedureMetadata] = []
            for method in iter_methods(class_node):
                kind = _procedure_kind(method, source_file)
                method_name = field(method, "name")
                if kind is not None and method_name is not None:
                    procedures.append(ProcedureMetadata(name=source_file.text(method_name), kind=kind))

            routers.append(
                RouterMetadata(
                    name=source_file.text(name_node),
                    path=source_file.path,
                    alias=_router_alias(router_decorator, source_file),
                    procedures=procedures,
                )
            )
        return routers
