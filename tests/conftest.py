import sys
from pathlib import Path

# Ensure src/ is on sys.path for imports like `import stockbrief.*`
PROJECT_ROOT = Path(__file__).resolve().parent.parent
SRC_PATH = PROJECT_ROOT / "src"
if SRC_PATH.exists():
    sys.path.insert(0, str(SRC_PATH))
# `tests.fixtures` helpers are imported from the project root
sys.path.insert(0, str(PROJECT_ROOT))

import pytest  # noqa: E402

from stockbrief.api.middleware import limiter  # noqa: E402


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    """Start every test with empty per-IP rate limit counters."""
    limiter.reset()
    yield
    limiter.reset()
