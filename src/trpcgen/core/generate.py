import logging
from dataclasses import dataclass
from pathlib import Path

from trpcgen.config import GeneratorOptions
from trpcgen.core.decorators import DecoratorSerializer
from trpcgen.core.flatten import SchemaFlattener
from trpcgen.core.imports import ImportsScanner
from trpcgen.core.project import Project
from trpcgen.core.router import RouterSerializer, render_routers
from trpcgen.core.scanner import RouterScanner
from trpcgen.core.static import ImportInjector, render_app_router
from trpcgen.core.synthesize import SchemaSynthesizer
from trpcgen.core.types import TypeResolver

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    output_path: Path
    source: str
    router_count: int
    procedure_count: int


def build_app_router(options: GeneratorOptions) -> GenerationResult:
    """Scan the project and render the app router module without writing it.

    Raises ``RouterLookupError`` when a scanned router cannot be found again.
    """
    project = Project(options.root)
    output_path = options.output_path.absolute()
    imports_scanner = ImportsScanner(project)
    injector = ImportInjector()

    flattener = SchemaFlattener(imports_scanner, injector, output_path, options.schema_namespace)
    serializer = RouterSerializer(
        project,
        DecoratorSerializer(flattener),
        TypeResolver(imports_scanner),
        SchemaSynthesizer(options.schema_namespace),
        auto_output_generation=options.auto_output_generation,
    )

    routers = serializer.serialize_routers(RouterScanner(project).scan())
    source = render_app_router(render_routers(routers), injector.render(output_path), options.schema_namespace)
    return GenerationResult(
        output_path=output_path,
        source=source,
        router_count=len(routers),
        procedure_count=sum(len(router.procedures) for router in routers),
    )


def run_generate(options: GeneratorOptions, write: bool = True) -> GenerationResult:
    result = build_app_router(options)
    if write:
        result.output_path.parent.mkdir(parents=True, exist_ok=True)
        result.output_path.write_text(result.source, encoding="utf-8")
        logger.info("Wrote %s", result.output_path)
    return result
