"""Unit tests for the generated module scaffolding and import injection."""

from pathlib import Path

from trpcgen.core.imports import ImportsScanner
from trpcgen.core.project import Project
from trpcgen.core.static import ImportInjector, module_specifier, render_app_router


def test_module_specifier() -> None:
    target = Path("/app/src/@generated/server.ts")

    assert module_specifier(target, Path("/app/src/users/user.schema.ts")) == "../users/user.schema"
    assert module_specifier(target, Path("/app/src/@generated/local.ts")) == "./local"
    assert module_specifier(target, Path("/app/src/@generated/nested/view.tsx")) == "./nested/view"


def test_injector_groups_by_module_and_deduplicates(
    project: Project, imports_scanner: ImportsScanner, tmp_path: Path
) -> None:
    project.create_source_file("factories.ts", "export const paginated = 1;\nexport const wrap = 2;")
    source_file = project.create_source_file("router.ts", "import { paginated, wrap as w } from './factories';")
    import_map = imports_scanner.build_import_map(source_file)
    injector = ImportInjector()
    target = tmp_path / "@generated" / "server.ts"

    injector.add_schema_imports(target, ["paginated", "w", "paginated", "unknownFactory"], import_map)

    assert injector.render(target) == ['import { paginated, wrap as w } from "../factories";']
    assert injector.render(tmp_path / "other.ts") == []


def test_render_app_router() -> None:
    source = render_app_router("users: t.router({  })", ['import { paginated } from "./factories";'])

    assert source == (
        'import { initTRPC } from "@trpc/server";\n'
        'import { z } from "zod";\n'
        'import { paginated } from "./factories";\n'
        "\n"
        "const t = initTRPC.create();\n"
        "const publicProcedure = t.procedure;\n"
        "\n"
        "const appRouter = t.router({users: t.router({  })});\n"
        "export type AppRouter = typeof appRouter;\n"
    )


def test_render_app_router_custom_namespace() -> None:
    assert 'import { z as zod } from "zod";' in render_app_router("", schema_namespace="zod")
