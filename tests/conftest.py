from __future__ import annotations

import matplotlib

matplotlib.use("Agg")

import numpy as np  # noqa: E402
import pytest  # noqa: E402

from hypercube.controller import PuzzleController  # noqa: E402
from hypercube.topology import PuzzleType  # noqa: E402


@pytest.fixture
def hypercube3() -> PuzzleType:
    return PuzzleType.rubiks_4d(3)


@pytest.fixture
def cube3() -> PuzzleType:
    return PuzzleType.rubiks_3d(3)


@pytest.fixture
def controller(hypercube3: PuzzleType) -> PuzzleController:
    return PuzzleController(hypercube3)


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(42)
