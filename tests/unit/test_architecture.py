"""Tests to verify hexagonal architecture structure."""

from pathlib import Path

import pytest

# Compute project root relative to this test file
PROJECT_ROOT = Path(__file__).parent.parent.parent


@pytest.fixture
def src_path() -> Path:
    """Return the src directory path."""
    return PROJECT_ROOT / "src"


def _import_lines(py_file: Path, prefix: str) -> list[str]:
    return [
        line.strip()
        for line in py_file.read_text().split("\n")
        if line.strip().startswith((f"from {prefix}", f"import {prefix}"))
    ]


def test_main_layers_exist(src_path: Path) -> None:
    """Verify all main layer directories exist."""
    layers = ["domain", "application", "infrastructure", "api", "bootstrap", "config"]
    for layer in layers:
        assert (src_path / layer).is_dir(), f"Missing layer: {layer}"
        assert (src_path / layer / "__init__.py").is_file(), (
            f"Missing {layer}/__init__.py"
        )


def test_domain_subdirectories_exist(src_path: Path) -> None:
    """Verify domain layer has required subdirectories."""
    domain = src_path / "domain"
    for subdir in ["models", "errors", "events"]:
        assert (domain / subdir).is_dir(), f"Missing domain subdir: {subdir}"
        assert (domain / subdir / "__init__.py").is_file(), (
            f"Missing {subdir}/__init__.py"
        )


@pytest.mark.parametrize(
    "outer_layer",
    ["src.application", "src.infrastructure", "src.api", "src.bootstrap", "src.config"],
)
def test_domain_has_no_outer_layer_imports(src_path: Path, outer_layer: str) -> None:
    """Domain is the innermost layer and imports nothing from outside it."""
    for py_file in (src_path / "domain").rglob("*.py"):
        lines = _import_lines(py_file, outer_layer)
        assert not lines, f"{py_file} imports {outer_layer}: {lines}"


def test_application_has_no_forbidden_imports(src_path: Path) -> None:
    """Application may use stubs, observability and config, never adapters or api.

    Services receive their repositories through the ports, so nothing in
    the application layer should know about PostgreSQL or FastAPI.
    """
    allowed_infra_patterns = (
        "from src.infrastructure.stubs",
        "from src.infrastructure.observability",
    )

    for py_file in (src_path / "application").rglob("*.py"):
        assert not _import_lines(py_file, "src.api"), f"{py_file} imports src.api"
        infra = [
            line
            for line in _import_lines(py_file, "src.infrastructure")
            if not line.startswith(allowed_infra_patterns)
        ]
        assert not infra, (
            f"{py_file} contains forbidden infrastructure import "
            f"(stubs/observability imports are allowed): {infra}"
        )


def test_api_reaches_storage_through_the_container(src_path: Path) -> None:
    """The API never imports persistence adapters directly."""
    for py_file in (src_path / "api").rglob("*.py"):
        lines = _import_lines(py_file, "src.infrastructure.adapters.persistence")
        assert not lines, f"{py_file} imports persistence adapters: {lines}"


def test_collaboration_error_exists() -> None:
    """Verify base exception class is defined."""
    from src.domain.exceptions import CollaborationError

    assert issubclass(CollaborationError, Exception)


def test_collaboration_error_importable_from_domain() -> None:
    """Verify CollaborationError is exported from domain __init__."""
    from src.domain import CollaborationError

    assert issubclass(CollaborationError, Exception)


def test_collaboration_error_accepts_message() -> None:
    """Verify CollaborationError can be instantiated with a message."""
    from src.domain.exceptions import CollaborationError

    error = CollaborationError("test message")
    assert str(error) == "test message"
    assert error.to_dict() == {
        "kind": "COLLABORATION_ERROR",
        "message": "test message",
        "details": {},
    }

    # Also verify default empty message works
    error_default = CollaborationError()
    assert str(error_default) == ""


def test_every_domain_error_declares_a_kind() -> None:
    """Each concrete error maps to a stable kind, never the base one."""
    from src.domain import errors
    from src.domain.exceptions import CollaborationError

    classes = [
        obj
        for obj in vars(errors).values()
        if isinstance(obj, type) and issubclass(obj, CollaborationError)
    ]

    assert classes
    for cls in classes:
        assert cls.kind != CollaborationError.kind, f"{cls.__name__} has no kind"
