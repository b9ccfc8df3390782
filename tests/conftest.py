"""
Pytest Configuration and Fixtures
"""

import pytest


@pytest.fixture
def knowledge_base(tmp_path):
    """A knowledge base directory with a single fox document."""
    kb = tmp_path / "knowledge_base"
    kb.mkdir()
    (kb / "fox.txt").write_text("The quick brown fox", encoding="utf-8")
    return kb
