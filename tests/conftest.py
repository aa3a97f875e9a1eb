from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.package_builder import PackageBuilder
from visinventory.config import InventoryConfig
from visinventory.walker import CorpusWalker, WalkContext


@pytest.fixture
def package_builder(tmp_path: Path) -> PackageBuilder:
    """Provide a reusable integrations tree rooted at the pytest tmp_path."""
    return PackageBuilder(tmp_path)


@pytest.fixture
def walker(tmp_path: Path) -> CorpusWalker:
    """Walker with provenance disabled so tests never shell out to git."""
    config = InventoryConfig(root=tmp_path, provenance=False)
    return CorpusWalker(WalkContext.from_config(config))
