# Make the project root importable so the command-line tools can be tested too.
import logging
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from universe_generator.generator import ChunkGenerator  # noqa: E402


@pytest.fixture
def logger():
    return logging.getLogger("universe_generator.tests")


@pytest.fixture
def chunk_generator(logger):
    return ChunkGenerator(config={}, logger=logger)
