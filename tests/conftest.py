from __future__ import annotations

import pytest

from hardiness.entities import Coordinate


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def virginia_point() -> Coordinate:
    return Coordinate(latitude=38.0, longitude=-78.5)


@pytest.fixture
def open_ocean() -> Coordinate:
    return Coordinate(latitude=-30.0, longitude=-140.0)
