from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.project_builder import ProjectBuilder, StubTransformer


@pytest.fixture
def project(tmp_path: Path) -> ProjectBuilder:
    """Provide a throwaway JavaScript project rooted at the pytest tmp_path."""
    return ProjectBuilder(tmp_path)


@pytest.fixture
def stub_transformer() -> StubTransformer:
    return StubTransformer()
