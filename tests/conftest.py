import pathlib
import pytest


@pytest.fixture(scope="session")
def repo_root():
    """Return the root directory of the kn project."""
    return pathlib.Path(__file__).resolve().parents[1]


@pytest.fixture(scope="session")
def fixture_dir(repo_root):
    """Return the directory holding sample note files."""
    return repo_root / "tests" / "fixtures"
