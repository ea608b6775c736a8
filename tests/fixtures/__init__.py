"""Test fixtures for TorKit tests.

- bundles: In-memory release archives and fake tor executables

Import fixtures in your tests using:
    from tests.fixtures.bundles import make_layout, READY_SCRIPT
"""

__all__ = [
    "bundles",
]
