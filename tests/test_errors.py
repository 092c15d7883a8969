from pathlib import Path

import pytest

from mcserverctl.errors import (
    AppError,
    ConfigError,
    JavaNotFoundError,
    ProcessError,
    ServerError,
    ServerJarNotFoundError,
    WebSocketError,
)


@pytest.mark.parametrize(
    "cls, prefix",
    [
        (ProcessError, "Process error: "),
        (ConfigError, "Configuration error: "),
        (ServerError, "Server error: "),
        (WebSocketError, "WebSocket error: "),
    ],
)
def test_message_errors_are_prefixed(cls, prefix):
    err = cls("something broke")
    assert str(err) == prefix + "something broke"
    assert err.message == "something broke"


def test_server_error_text():
    assert str(ServerError("Server is not running")) == "Server error: Server is not running"


def test_java_not_found_text():
    assert str(JavaNotFoundError()) == "Java runtime not found"


def test_server_jar_not_found_keeps_path():
    path = Path("/srv/game/server.jar")
    err = ServerJarNotFoundError(path)
    assert err.path == path
    assert str(path) in str(err)
    assert str(err).startswith("Server JAR not found at: ")


@pytest.mark.parametrize(
    "err, expected_start",
    [
        (ProcessError("x"), "Process error: x"),
        (ConfigError("x"), "Configuration error: x"),
        (ServerError("x"), "Server error: x"),
        (WebSocketError("x"), "WebSocket error: x"),
        (JavaNotFoundError(), "Java runtime not found"),
        (ServerJarNotFoundError("server.jar"), "Server JAR not found at: "),
    ],
)
def test_all_errors_are_caught_as_app_errors(err, expected_start):
    with pytest.raises(AppError) as excinfo:
        raise err
    assert excinfo.value is err
    assert str(excinfo.value).startswith(expected_start)