import logging

import pytest


@pytest.fixture(autouse=True)
def restore_root_logging():
    """configure_logging replaces root handlers; put them back after each test"""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture
def make_tree(tmp_path):
    """Create files (and their parent directories) under tmp_path"""
    def _make(files):
        for relative, content in files.items():
            path = tmp_path / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        return tmp_path
    return _make
