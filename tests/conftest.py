#
# Pytest Fixtures
#

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from tagview.heap import Heap
from tagview.registry import TypeRegistry, VariantInfo
from tagview.settings import PrintSettings, configure


# Fixtures -------------------------------------------------------------------------------------------------------------

@pytest.fixture
def heap() -> Heap:
    return Heap()


@pytest.fixture
def registry() -> TypeRegistry:
    """Registry with a Point record and a Shape sum type."""
    reg = TypeRegistry(bucket_count=8)
    reg.register_record("Point", ["x", "y"])
    reg.register_record("Empty", [])
    reg.register_sum("Shape", [
        VariantInfo(0, "Nothing"),
        VariantInfo(1, "Circle", 1),
        VariantInfo(2, "Rect", 2, ("w", "h")),
        VariantInfo(3, "Line", 2),
    ])
    return reg


@pytest.fixture
def plain() -> PrintSettings:
    return PrintSettings.plain()


@pytest.fixture(autouse=True)
def reset_module_settings():
    """Restore module-wide default settings after each test."""
    yield
    configure(preset="default")
