import pytest

import config
import main
from db import dispose_db


@pytest.fixture
def cli_env(tmp_path, monkeypatch, stores):
    """Point the CLI at a throw-away base dir, database and log file."""
    monkeypatch.setattr(config, "BASE_DIR", tmp_path)
    monkeypatch.setattr(config, "DB_URL", f"sqlite:///{tmp_path / 'cli.sqlite'}")
    monkeypatch.setattr(config, "LOG_PATH", tmp_path / "var" / "log" / "exception.log")
    (tmp_path / "var" / "import").mkdir(parents=True)
    yield tmp_path
    dispose_db()


def _write(base, text, name="categories.csv"):
    path = base / "var" / "import" / name
    path.write_text(text, encoding="utf-8")
    return f"var/import/{name}"


@pytest.mark.parametrize("argv", [[], ["-h"], ["help"], ["-t"]])
def test_usage_without_file(argv, capsys):
    assert main.main(argv) == 0
    out = capsys.readouterr().out
    assert out.startswith("Usage:")
    assert "--force" in out


def test_import_prints_progress_and_timing(cli_env, capsys):
    rel = _write(cli_env, ",,de\nMen,,Herren\n,Shirts,Hemden\n")

    assert main.main(["-f", rel]) == 0

    out = capsys.readouterr().out
    assert "-- Men [de: Herren]" in out
    assert "---- Shirts [de: Hemden]" in out
    assert "Reindexing all..." in out
    assert "Created 2 categories, 2 store labels from 3 lines" in out
    assert "Script Start: " in out
    assert "Script End: " in out
    assert "Duration: " in out


def test_header_flag_and_dialect_options(cli_env, capsys):
    rel = _write(cli_env, "'Men'|'Herren'\n'Men'|'Herren'\n")

    assert main.main(["-f", rel, "-d", "|", "-e", "'", "-t"]) == 0

    out = capsys.readouterr().out
    # row 1 is the header, so both of its columns hold store names
    assert "-- Men" not in out
    assert "Created 0 categories, 0 store labels from 2 lines" in out


def test_header_row_with_blank_first_cell_and_dialect_options(cli_env, capsys):
    rel = _write(cli_env, "|de\n'Men, Boys'|Herren\n")

    assert main.main(["-f", rel, "-d", "|", "-e", "'", "-t"]) == 0

    assert "-- Men, Boys [de: Herren]" in capsys.readouterr().out


def test_missing_file_is_fatal(cli_env, capsys):
    with pytest.raises(SystemExit) as exc:
        main.main(["-f", "var/import/missing.csv"])

    assert exc.value.code == 1
    err = capsys.readouterr().err
    assert f"File {cli_env / 'var/import/missing.csv'} does not exist." in err


def test_second_run_needs_force(cli_env, capsys):
    rel = _write(cli_env, "Men\nWomen\n")
    assert main.main(["-f", rel]) == 0

    with pytest.raises(SystemExit) as exc:
        main.main(["-f", rel])
    assert exc.value.code == 1
    assert "Use --force option" in capsys.readouterr().err

    assert main.main(["-f", rel, "--force"]) == 0
    assert "Deleted 2 old categories" in capsys.readouterr().out


def test_failed_row_is_logged_and_fatal(cli_env, capsys):
    rel = _write(cli_env, ",xx\nMen,Herren\n")

    with pytest.raises(SystemExit) as exc:
        main.main(["-f", rel])

    assert exc.value.code == 1
    err = capsys.readouterr().err
    assert err.strip() == "Could not find store with code 'xx'"
    log = (cli_env / "var" / "log" / "exception.log").read_text(encoding="utf-8")
    assert "Category import failed" in log
    assert "StoreNotFoundError" in log


def test_unknown_option_is_fatal(cli_env):
    with pytest.raises(SystemExit) as exc:
        main.main(["-f", "x.csv", "--bogus"])
    assert exc.value.code == 1
