import logging

import pytest

from main import EXIT_ERROR, EXIT_OK, EXIT_PRECONDITION, main


@pytest.fixture(autouse=True)
def env(monkeypatch, home):
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("DOTFILES_REPO", raising=False)
    yield
    logger = logging.getLogger("dotfiles")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def test_store_uses_default_repo(home):
    (home / ".vimrc").write_text("set nu")

    assert main(["store", "vim"]) == EXIT_OK

    assert (home / ".dotfiles" / "vim" / ".vimrc").read_text() == "set nu"


def test_store_then_stage_with_repo_option(home, repo):
    (home / ".zshrc").write_text("export EDITOR=nvim")

    assert main(["-r", str(repo), "store", "zsh"]) == EXIT_OK
    (home / ".zshrc").write_text("changed")
    assert main(["--repo", str(repo), "stage", "zsh"]) == EXIT_OK

    assert (home / ".zshrc").read_text() == "export EDITOR=nvim"


def test_skipped_packages_exit_successfully(repo, capsys):
    assert main(["-r", str(repo), "store", "missingpkg"]) == EXIT_OK
    assert main(["-r", str(repo), "stage", "unknownpkg"]) == EXIT_OK

    err = capsys.readouterr().err
    assert "Could not find config files for missingpkg" in err
    assert "No stored config found for unknownpkg" in err
    assert not repo.exists()


def test_missing_home(monkeypatch, capsys):
    monkeypatch.delenv("HOME")

    assert main(["store", "vim"]) == EXIT_ERROR
    assert "HOME" in capsys.readouterr().err


def test_malformed_invocation(repo):
    with pytest.raises(SystemExit) as exc_info:
        main(["-r", str(repo), "push", "vim"])

    assert exc_info.value.code == 2
    assert not repo.exists()


def test_missing_subcommand():
    with pytest.raises(SystemExit) as exc_info:
        main([])

    assert exc_info.value.code == 2


def test_precondition_violation_halts_run(home, repo, capsys):
    (repo / "vim").mkdir(parents=True)
    (repo / "vim" / ".vimrc").write_text("stored")
    (repo / "vim" / ".viminfo").write_text("stored")
    (repo / "zsh").mkdir()
    (repo / "zsh" / ".zshrc").write_text("stored")
    (home / ".viminfo").write_text("live")

    assert main(["-r", str(repo), "stage", "vim", "zsh"]) == EXIT_PRECONDITION

    assert "FATAL" in capsys.readouterr().err
    # No further packages are processed
    assert not (home / ".zshrc").exists()


def test_delete_failure_aborts_run(home, repo, monkeypatch, capsys):
    (home / ".vimrc").write_text("v")

    def fail(path):
        raise PermissionError(f"Permission denied: '{path}'")

    monkeypatch.setattr("dotfiles.sync_manager.delete_all", fail)

    assert main(["-r", str(repo), "store", "vim"]) == EXIT_ERROR
    assert "Permission denied" in capsys.readouterr().err


def test_dry_run_does_not_write(home, repo):
    (home / ".vimrc").write_text("v")

    assert main(["-r", str(repo), "--dry-run", "store", "vim"]) == EXIT_OK

    assert not repo.exists()


def test_list_command(home, repo, capsys):
    (repo / "vim").mkdir(parents=True)
    (repo / "vim" / ".vimrc").write_text("v")

    assert main(["-r", str(repo), "list"]) == EXIT_OK

    assert "vim: .vimrc (1 files, missing in home)" in capsys.readouterr().out


def test_invalid_settings_file(repo, capsys):
    repo.mkdir()
    (repo / "dotfiles.yaml").write_text("log_level: LOUD\n")

    assert main(["-r", str(repo), "store", "vim"]) == EXIT_ERROR
    assert "Configuration error" in capsys.readouterr().err


def test_log_file_written(home, repo):
    repo.mkdir()
    (repo / "dotfiles.yaml").write_text("log_file: logs/run.log\n")
    (home / ".vimrc").write_text("v")

    assert main(["-r", str(repo), "store", "vim"]) == EXIT_OK

    log_file = home / ".local" / "state" / "dotfiles" / "logs" / "run.log"
    assert "Stored 'vim'" in log_file.read_text()
    assert not (repo / "logs").exists()


def test_path_package_name_rejected(home, repo, tmp_path, capsys):
    (repo / "x").mkdir(parents=True)
    (home / ".vimrc").write_text("live")

    assert main(["-r", str(repo), "stage", str(tmp_path / "elsewhere")]) == EXIT_ERROR

    assert "Package name" in capsys.readouterr().err
    assert (home / ".vimrc").read_text() == "live"
