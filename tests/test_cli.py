"""Tests for the create-user command in main.py."""

import pytest

import main as cli
from auth.passwords import verify_password
from auth.store import UserStore
from core.config import Settings


@pytest.fixture
def db_url(tmp_path, monkeypatch) -> str:
    url = f"sqlite:///{tmp_path}/auth.db"
    settings = Settings(_env_file=None, debug=True, auth_db_url=url)
    monkeypatch.setattr(cli, "get_settings", lambda: settings)
    return url


def test_create_user(db_url: str, capsys) -> None:
    assert cli.main(["create-user", "--username", "alice", "--email", "alice@example.com", "--password", "s3cret"]) == 0
    assert "Created user 'alice'" in capsys.readouterr().out

    store = UserStore(db_url)
    try:
        user = store.get_user("alice")
    finally:
        store.close()
    assert user.email == "alice@example.com"
    assert verify_password("s3cret", user.password_hash)


def test_duplicate_user_fails(db_url: str, capsys) -> None:
    argv = ["create-user", "--username", "bob", "--email", "bob@example.com", "--password", "pw"]
    assert cli.main(argv) == 0
    assert cli.main(argv) == 1
    assert "already exists" in capsys.readouterr().out


def test_prompted_passwords_must_match(db_url: str, monkeypatch) -> None:
    answers = iter(["first", "second"])
    monkeypatch.setattr(cli.getpass, "getpass", lambda prompt: next(answers))
    assert cli.main(["create-user", "--username", "carol", "--email", "carol@example.com"]) == 1


def test_empty_password_rejected(db_url: str) -> None:
    assert cli.main(["create-user", "--username", "dave", "--email", "dave@example.com", "--password", ""]) == 1


def test_command_is_required() -> None:
    with pytest.raises(SystemExit):
        cli.main([])
