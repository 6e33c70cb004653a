import pytest


@pytest.fixture
def make_tree(tmp_path):
    """Create files under tmp_path from a {relative path: str | bytes} mapping."""

    def _make(files):
        for rel, content in files.items():
            path = tmp_path / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_bytes(content.encode("utf-8"))
        return tmp_path

    return _make
