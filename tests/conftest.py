import pytest

from dotfiles.config import AppConfig


@pytest.fixture
def home(tmp_path):
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    return home_dir


@pytest.fixture
def repo(tmp_path):
    # Left uncreated, store must build it
    return tmp_path / "repo"


@pytest.fixture
def config(home, repo):
    return AppConfig(home=home, repo=repo)


@pytest.fixture
def make_tree():
    """Create files under a root from a {relative path: content} mapping."""

    def _make_tree(root, files):
        for rel_path, content in files.items():
            path = root / rel_path
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        return root

    return _make_tree
