import pytest
from pathlib import Path

from renderkit.core.writer import ResponseRecorder

TESTDATA = Path(__file__).parent / "testdata"

@pytest.fixture
def testdata() -> Path:
    """Static template trees shared by the tests."""
    return TESTDATA

@pytest.fixture
def recorder() -> ResponseRecorder:
    return ResponseRecorder()

@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """A writable template root for tests that edit files between renders."""
    root = tmp_path / "templates"
    root.mkdir()
    return root
