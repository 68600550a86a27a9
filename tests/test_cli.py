import pytest

from quote_board.cli import build_parser
from quote_board.main import main


@pytest.fixture
def cli(db_url, monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("BROADCAST_MODE", raising=False)

    def _run(*argv: str) -> None:
        main(["--db-connection", db_url, *argv])

    return _run


def test_parser_requires_a_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_create_requires_company_id():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["create", "A"])


def test_full_lifecycle(cli, capsys):
    cli("init-db")
    cli("add-company", "Kpop")
    cli("create", "Alpha", "--company-id", "1")
    out = capsys.readouterr().out
    assert "Company 1 created" in out
    assert "Quote 1 created" in out
    assert 'action="prepend" target="quotes"' in out

    cli("update", "1", "--name", "Beta")
    out = capsys.readouterr().out
    assert "Quote 1 updated" in out
    assert 'action="replace" target="quote_1"' in out

    cli("create", "Gamma", "--company-id", "1")
    cli("list")
    out = capsys.readouterr().out
    assert out.index("Gamma") < out.index("Beta")

    cli("delete", "1")
    out = capsys.readouterr().out
    assert 'action="remove" target="quote_1"' in out


def test_deferred_mode_prints_broadcast(cli, capsys):
    cli("init-db")
    cli("add-company", "Kpop")
    cli("--broadcast-mode", "deferred", "create", "Alpha", "--company-id", "1")

    out = capsys.readouterr().out
    assert 'action="prepend" target="quotes"' in out


def test_validation_error_exits_with_status_1(cli, capsys):
    cli("init-db")

    with pytest.raises(SystemExit) as exc_info:
        cli("create", "Alpha", "--company-id", "1")

    assert exc_info.value.code == 1
    assert "Company must exist" in capsys.readouterr().err


def test_update_without_changes_is_a_usage_error(cli):
    with pytest.raises(SystemExit) as exc_info:
        cli("update", "1")
    assert exc_info.value.code == 2
