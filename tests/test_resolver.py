import pytest

from dotfiles.resolver import (
    SUFFIXES,
    candidate_paths,
    find_package_path,
    relative_package_path,
)


def test_candidate_order(tmp_path):
    candidates = candidate_paths(tmp_path, "vim")

    assert len(candidates) == 2 + 2 * len(SUFFIXES)
    assert candidates[0] == tmp_path / ".vim"
    assert candidates[1] == tmp_path / ".vimrc"
    assert candidates[len(SUFFIXES)] == tmp_path / ".vim.lua"
    assert candidates[len(SUFFIXES) + 1] == tmp_path / ".config" / "vim"
    assert candidates[-1] == tmp_path / ".config" / "vim.lua"


@pytest.mark.parametrize(
    "rel_path",
    [".zsh", ".zshrc", ".zsh.d", ".zsh.conf", ".zsh.conf.d", ".zsh.toml",
     ".zsh.xml", ".zsh.json", ".zsh.yml", ".zsh.lua",
     ".config/zsh", ".config/zshrc", ".config/zsh.d", ".config/zsh.conf",
     ".config/zsh.conf.d", ".config/zsh.toml", ".config/zsh.xml",
     ".config/zsh.json", ".config/zsh.yml", ".config/zsh.lua"],
)
def test_each_convention_resolves(tmp_path, rel_path):
    target = tmp_path / rel_path
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text("x")

    assert find_package_path(tmp_path, "zsh") == target


def test_directory_is_resolved(tmp_path):
    target = tmp_path / ".config" / "nvim"
    target.mkdir(parents=True)

    assert find_package_path(tmp_path, "nvim") == target


def test_nothing_found(tmp_path):
    (tmp_path / ".config").mkdir()
    (tmp_path / ".other").write_text("x")

    assert find_package_path(tmp_path, "missing") is None
    assert relative_package_path(tmp_path, "missing") is None


def test_first_match_wins(tmp_path):
    (tmp_path / ".config" / "git").mkdir(parents=True)
    (tmp_path / ".git.toml").write_text("x")
    (tmp_path / ".git.conf").write_text("x")

    # .git.conf comes before .git.toml and everything under .config
    assert find_package_path(tmp_path, "git") == tmp_path / ".git.conf"


def test_dotfile_beats_config_dir(tmp_path):
    (tmp_path / ".config" / "tmux").mkdir(parents=True)
    (tmp_path / ".tmux.conf").write_text("x")

    assert find_package_path(tmp_path, "tmux") == tmp_path / ".tmux.conf"


def test_relative_path(tmp_path):
    (tmp_path / ".config" / "nvim").mkdir(parents=True)

    assert str(relative_package_path(tmp_path, "nvim")) == ".config/nvim"


def test_resolution_has_no_side_effects(tmp_path):
    find_package_path(tmp_path, "nvim")

    assert list(tmp_path.iterdir()) == []
