"""cmdpalette Test Suite.

Test organization mirrors the cmdpalette/ package:
    tests/
    ├── conftest.py          # Shared fixtures
    ├── test_core/           # Config, logging, exceptions, dispatch
    ├── test_engine/         # Registry, matching, calculator, search, recency
    └── test_gui/            # Controller and keyboard surface

Markers:
    - @pytest.mark.slow: Tests taking > 1 second
"""
