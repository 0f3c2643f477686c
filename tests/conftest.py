"""
Shared pytest fixtures for binpack-bp tests.
"""

import pytest

from binpack_bp.config import BinPackConfig
from binpack_bp.core.problem import BinPackingInstance


def pytest_configure(config):
    """Add custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')")


@pytest.fixture
def solver_config():
    """Silent, single-threaded configuration independent of the environment."""
    return BinPackConfig(log_level="WARNING", num_threads=1, verbosity=0)


@pytest.fixture
def pairable_instance():
    """Items 0 and 1 share a bin, item 2 fills one alone (optimum: 2 bins)."""
    return BinPackingInstance(item_weights=[2, 3, 5], bin_capacity=5, name="pairable")


@pytest.fixture
def four_item_instance():
    """Three 4s and a 6 in bins of 10 (optimum: 2 bins, LP bound 2)."""
    return BinPackingInstance(item_weights=[4, 4, 4, 6], bin_capacity=10, name="four_items")


@pytest.fixture
def full_bins_instance():
    """Two items that each fill a bin (optimum: 2 bins)."""
    return BinPackingInstance(item_weights=[5, 5], bin_capacity=5, name="full_bins")


@pytest.fixture
def six_item_instance():
    """Weights 7..2 in bins of 10 (optimum: 3 bins)."""
    return BinPackingInstance(item_weights=[7, 6, 5, 4, 3, 2], bin_capacity=10, name="six_items")


@pytest.fixture
def bpplib_file(tmp_path):
    """A small BPPLIB file in the one-weight-per-line layout."""
    path = tmp_path / "tiny_bpp.txt"
    path.write_text("4\n10\n6\n4\n5\n5\n")
    return path


@pytest.fixture
def bpplib_csp_file(tmp_path):
    """A small BPPLIB file in the weight/demand layout."""
    path = tmp_path / "tiny_csp.txt"
    path.write_text("2\n100\n45 2\n30 3\n")
    return path

