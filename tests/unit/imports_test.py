"""Unit tests for the import map builder."""

from trpcgen.core.imports import ImportsScanner
from trpcgen.core.project import Project


def test_named_and_aliased_imports(project: Project, imports_scanner: ImportsScanner) -> None:
    origin = project.create_source_file(
        "schemas.ts",
        "export const userSchema = z.object({});\nexport interface User { id: string }",
    )
    source_file = project.create_source_file(
        "router.ts",
        "import { z } from 'zod';\nimport { userSchema as base, User } from './schemas';",
    )

    import_map = imports_scanner.build_import_map(source_file)

    assert set(import_map) == {"base", "User"}
    assert import_map["base"].name == "userSchema"
    assert import_map["base"].source_file is origin
    assert import_map["base"].initializer is not None
    assert origin.text(import_map["base"].initializer) == "z.object({})"
    assert import_map["User"].declaration.type == "interface_declaration"
    assert import_map["User"].initializer is None


def test_default_import(project: Project, imports_scanner: ImportsScanner) -> None:
    project.create_source_file("schema.ts", "const schema = z.string();\nexport default schema;")
    source_file = project.create_source_file("router.ts", "import userName from './schema';")

    import_map = imports_scanner.build_import_map(source_file)

    assert import_map["userName"].name == "schema"


def test_named_re_export_from_other_module(project: Project, imports_scanner: ImportsScanner) -> None:
    project.create_source_file("inner.ts", "export const a = z.number();")
    project.create_source_file("barrel.ts", "export { a as b } from './inner';")
    source_file = project.create_source_file("router.ts", "import { b } from './barrel';")

    import_map = imports_scanner.build_import_map(source_file)

    assert import_map["b"].name == "a"
    assert import_map["b"].source_file.path.name == "inner.ts"


def test_unresolvable_modules_and_names_are_skipped(project: Project, imports_scanner: ImportsScanner) -> None:
    project.create_source_file("schemas.ts", "export const present = z.string();")
    source_file = project.create_source_file(
        "router.ts",
        "import { missing, present } from './schemas';\n"
        "import { other } from './nowhere';\n"
        "import * as all from './schemas';",
    )

    import_map = imports_scanner.build_import_map(source_file)

    assert set(import_map) == {"present"}


def test_star_re_export_cycle_terminates(project: Project, imports_scanner: ImportsScanner) -> None:
    project.create_source_file("a.ts", "export * from './b';")
    project.create_source_file("b.ts", "export * from './a';")
    source_file = project.create_source_file("router.ts", "import { ghost } from './a';")

    assert imports_scanner.build_import_map(source_file) == {}


def test_import_map_is_cached_per_file(project: Project, imports_scanner: ImportsScanner) -> None:
    project.create_source_file("schemas.ts", "export const s = z.string();")
    source_file = project.create_source_file("router.ts", "import { s } from './schemas';")

    assert imports_scanner.build_import_map(source_file) is imports_scanner.build_import_map(source_file)


def test_default_exported_expression(project: Project, imports_scanner: ImportsScanner) -> None:
    origin = project.create_source_file("schema.ts", "export default z.object({ id: z.string() });")
    source_file = project.create_source_file("router.ts", "import userSchema from './schema';")

    definition = imports_scanner.build_import_map(source_file)["userSchema"]

    assert definition.name == "default"
    assert definition.initializer is not None
    assert origin.text(definition.initializer) == "z.object({ id: z.string() })"


def test_exported_function_declaration(project: Project, imports_scanner: ImportsScanner) -> None:
    project.create_source_file("factories.ts", "export function paginated(item) { return z.array(item); }")
    source_file = project.create_source_file("router.ts", "import { paginated } from './factories';")

    definition = imports_scanner.build_import_map(source_file)["paginated"]

    assert definition.declaration.type == "function_declaration"
    assert definition.initializer is None
