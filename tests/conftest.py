import sys
from pathlib import Path
_root = Path(__file__).resolve().parents[1]
if str(_root) not in sys.path:
    sys.path.insert(0, str(_root))

import pytest

import config


@pytest.fixture(params=[True, False], ids=["numba", "numpy"])
def kernel(request, monkeypatch):
    """Run a test once with the Numba kernels and once with pure NumPy."""
    monkeypatch.setattr(config, "USE_NUMBA", request.param)
    return request.param
