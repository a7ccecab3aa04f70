"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from minpmt.config import ProjectConfig
from minpmt.storage import TicketStore


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Create a temporary project root for testing."""
    return tmp_path


@pytest.fixture
def config() -> ProjectConfig:
    """Default project configuration."""
    return ProjectConfig()


@pytest.fixture
def store(project_root: Path, config: ProjectConfig) -> TicketStore:
    """Create a ticket store rooted in the temporary project."""
    return TicketStore(config, root=project_root)


@pytest.fixture
def tickets_dir(store: TicketStore) -> Path:
    """The store's ticket folder, created up front."""
    store.ensure_ready()
    return store.tickets_dir


def write_ticket_file(path: Path, header: str, body: str = "\nBody\n") -> Path:
    """Write a markdown file with a raw YAML header."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"---\n{header}---\n{body}", encoding="utf-8")
    return path
