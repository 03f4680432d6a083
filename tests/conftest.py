"""Global pytest configuration for entity-events.

The module ensures the ``src`` tree is importable regardless of whether the
package has been installed, and restores the package logger between tests so
level and handler changes made by one test do not leak into log capture
assertions in another.
"""

import logging
import sys
from pathlib import Path

import pytest

# Add the src directory to the Python path so imports can work correctly
project_root = Path(__file__).parent.parent
src_dir = project_root / "src"

if str(src_dir) not in sys.path:
    sys.path.insert(0, str(src_dir))


@pytest.fixture(autouse=True)
def _restore_package_logger():
    """Reset the ``entity_events`` logger after each test."""

    logger = logging.getLogger("entity_events")
    previous = (logger.level, list(logger.handlers), logger.propagate)
    logger.propagate = True
    yield
    level, handlers, propagate = previous
    logger.setLevel(level)
    logger.handlers[:] = handlers
    logger.propagate = propagate
