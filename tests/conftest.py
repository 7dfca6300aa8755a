"""Shared fixtures and helpers for tests."""

from pathlib import Path

import pytest
from tree_sitter import Node, Parser
from tree_sitter_language_pack import get_parser

from trpcgen.core.ast import SourceFile, field
from trpcgen.core.flatten import SchemaFlattener
from trpcgen.core.imports import ImportsScanner
from trpcgen.core.project import Project
from trpcgen.core.static import ImportInjector

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def initializer(source_file: SourceFile, name: str) -> Node:
    """Return the initializer of the top-level variable ``name``."""
    declarator = source_file.get_variable_declaration(name)
    assert declarator is not None, f"{name} is not declared"
    value = field(declarator, "value")
    assert value is not None
    return value


def write_files(root: Path, files: dict[str, str]) -> None:
    for relative, text in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def typescript_parser() -> Parser:
    """Return a tree-sitter parser for TypeScript."""
    return get_parser("typescript")


@pytest.fixture
def project(tmp_path: Path) -> Project:
    return Project(tmp_path)


@pytest.fixture
def imports_scanner(project: Project) -> ImportsScanner:
    return ImportsScanner(project)


@pytest.fixture
def injector() -> ImportInjector:
    return ImportInjector()


@pytest.fixture
def output_path(tmp_path: Path) -> Path:
    return tmp_path / "server.ts"


@pytest.fixture
def flattener(imports_scanner: ImportsScanner, injector: ImportInjector, output_path: Path) -> SchemaFlattener:
    return SchemaFlattener(imports_scanner, injector, output_path)
