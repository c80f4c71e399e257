"""Tests for the console commands."""

import pytest
from typer.testing import CliRunner

from src import cli
from src.modules.chat.schemas import StreamFragment
from src.modules.chat.service import ChatSession

runner = CliRunner()


@pytest.fixture
def use_cli_session(monkeypatch):
    def _use(session: ChatSession) -> None:
        monkeypatch.setattr(cli, "build_session", lambda settings: session)

    return _use


def test_ask_prints_response(make_backend, make_session, use_cli_session):
    backend = make_backend(choices=["Paris."])
    use_cli_session(make_session(backend))

    result = runner.invoke(cli.app, ["ask", "Capital of France?", "--system", "Be terse."])

    assert result.exit_code == 0
    assert "Response:Paris." in result.stdout
    assert backend.requests[0].messages[0].content == "Be terse."


def test_ask_prints_only_first_choice(make_backend, make_session, use_cli_session):
    use_cli_session(make_session(make_backend(choices=["first", "second"])))

    result = runner.invoke(cli.app, ["ask", "hello"])

    assert result.exit_code == 0
    assert result.stdout.count("Response:") == 1
    assert "second" not in result.stdout


def test_ask_backend_error_exits_nonzero(make_backend, make_session, use_cli_session):
    use_cli_session(make_session(make_backend(error=RuntimeError("boom"))))

    result = runner.invoke(cli.app, ["ask", "hello"])

    assert result.exit_code == 1
    assert "Response:" not in result.stdout


def test_missing_credentials_exit(
    make_backend, make_session, use_cli_session, missing_credentials
):
    backend = make_backend()
    use_cli_session(make_session(backend, missing_credentials))

    result = runner.invoke(cli.app, ["stream", "hello"])

    assert result.exit_code == 1
    assert backend.requests == []


def test_empty_model_exit(make_backend, make_session, use_cli_session):
    backend = make_backend()
    use_cli_session(make_session(backend, model=""))

    result = runner.invoke(cli.app, ["ask", "hello"])

    assert result.exit_code == 1
    assert result.exception is None or isinstance(result.exception, SystemExit)
    assert backend.requests == []


def test_stream_prints_role_line_then_content(make_backend, make_session, use_cli_session):
    backend = make_backend(
        fragments=[
            StreamFragment(role="assistant"),
            StreamFragment(content="Hi"),
            StreamFragment(content=" there"),
        ]
    )
    use_cli_session(make_session(backend))

    result = runner.invoke(cli.app, ["stream", "hello"])

    assert result.exit_code == 0
    assert result.stdout == "Role: assistant\nHi there\n"


def test_stream_backend_error_exits_nonzero(make_backend, make_session, use_cli_session):
    backend = make_backend(
        fragments=[StreamFragment(content="Hi")], error=RuntimeError("reset")
    )
    use_cli_session(make_session(backend))

    result = runner.invoke(cli.app, ["stream", "hello"])

    assert result.exit_code == 1
    assert result.stdout.startswith("Hi")
