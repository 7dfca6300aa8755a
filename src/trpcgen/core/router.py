from __future__ import annotations

import logging
import re
from pathlib import Path

from trpcgen.core.ast import get_decorators, get_method
from trpcgen.core.decorators import DecoratorSerializer
from trpcgen.core.procedure import find_procedure_decorator, render_procedure, with_output
from trpcgen.core.project import Project
from trpcgen.core.synthesize import SchemaSynthesizer
from trpcgen.core.types import TypeResolver
from trpcgen.models import ProcedureDescriptor, ProcedureMetadata, RouterDescriptor, RouterMetadata

logger = logging.getLogger(__name__)

_WORDS = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|\d+")


class RouterLookupError(LookupError):
    """Raised when router metadata no longer matches the source it was collected from."""


def camel_case(name: str) -> str:
    """``UserRouter`` -> ``userRouter``, ``HTTPRouter`` -> ``httpRouter``, ``user_router`` -> ``userRouter``."""
    words = _WORDS.findall(name)
    if not words:
        return ""
    return words[0].lower() + "".join(word.capitalize() for word in words[1:])


class RouterSerializer:
    def __init__(
        self,
        project: Project,
        decorator_serializer: DecoratorSerializer,
        type_resolver: TypeResolver,
        synthesizer: SchemaSynthesizer,
        auto_output_generation: bool = False,
    ) -> None:
        self._project = project
        self._decorators = decorator_serializer
        self._types = type_resolver
        self._synthesizer = synthesizer
        self._auto_output_generation = auto_output_generation

    def serialize_routers(self, routers: list[RouterMetadata]) -> list[RouterDescriptor]:
        return [
            RouterDescriptor(
                name=router.name,
                alias=router.alias,
                procedures=[
                    self.serialize_procedure(router.path, procedure, router.name) for procedure in router.procedures
                ],
            )
            for router in routers
        ]

    def serialize_procedure(
        self, router_path: Path, procedure: ProcedureMetadata, router_name: str
    ) -> ProcedureDescriptor:
        source_file = self._project.get_source_file(router_path)
        class_declaration = source_file.get_class(router_name)
        if class_declaration is None:
            raise RouterLookupError(f"Could not find router {router_name} class declaration.")

        method = get_method(class_declaration, procedure.name, source_file)
        if method is None:
            raise RouterLookupError(f"Could not find {router_name}.{procedure.name} method declaration.")

        decorator_nodes = get_decorators(method)
        if not decorator_nodes:
            raise RouterLookupError(f"Could not find {router_name}.{procedure.name} method decorators.")

        decorators = self._decorators.serialize_procedure_decorators(decorator_nodes, source_file)

        procedure_decorator = find_procedure_decorator(decorators)
        if (
            self._auto_output_generation
            and procedure_decorator is not None
            and "output" not in procedure_decorator.arguments
        ):
            output = self._synthesizer.synthesize(self._types.return_type(method, source_file))
            logger.debug("Generated output schema for %s.%s", router_name, procedure.name)
            generated = with_output(procedure_decorator, output)
            decorators = [generated if decorator is procedure_decorator else decorator for decorator in decorators]

        return ProcedureDescriptor(name=procedure.name, decorators=decorators)


def render_router(router: RouterDescriptor) -> str:
    key = router.alias if router.alias is not None else camel_case(router.name)
    fragments = [fragment for fragment in map(render_procedure, router.procedures) if fragment]
    procedures = ",\n".join(fragments)
    return f"{key}: t.router({{ {procedures} }})"


def render_routers(routers: list[RouterDescriptor]) -> str:
    return ",\n".join(render_router(router) for router in routers)
