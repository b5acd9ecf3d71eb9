import pytest
import requests

import readiness
from common import RetryError


class FakeResponse:
    def __init__(self, status_code=200, text="<h1>Hello from Azure!</h1>"):
        self.status_code = status_code
        self.text = text


@pytest.fixture
def responses(monkeypatch):
    """Queue of responses (or exceptions) returned by requests.get."""
    queue = []

    def fake_get(url, timeout):
        item = queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    monkeypatch.setattr(readiness.requests, "get", fake_get)
    return queue


def test_http_probe_ok(responses):
    responses.append(FakeResponse(200))
    assert readiness.http_probe("http://20.1.2.3").status_code == 200


def test_http_probe_wrong_status(responses):
    responses.append(FakeResponse(503))
    assert readiness.http_probe("http://20.1.2.3") is None


def test_http_probe_connection_error(responses):
    responses.append(requests.ConnectionError("refused"))
    assert readiness.http_probe("http://20.1.2.3") is None


def test_http_probe_expected_content(responses):
    responses.append(FakeResponse(200, "It works! (Apache default page)"))
    assert readiness.http_probe("http://20.1.2.3", expected_content="Hello") is None


def test_verify_http_retries_until_served(responses, sleeps):
    responses += [
        requests.ConnectionError("refused"),
        FakeResponse(404),
        FakeResponse(200),
    ]
    response = readiness.verify_http("http://20.1.2.3", retries=5, delay=10)
    assert response.status_code == 200
    assert sleeps == [10, 10]


def test_verify_http_non_2xx_expectation(responses, sleeps):
    responses.append(FakeResponse(404))
    response = readiness.verify_http(
        "http://20.1.2.3/missing", retries=1, expected_status=404
    )
    assert response.status_code == 404


def test_verify_http_gives_up(responses, sleeps):
    responses += [FakeResponse(500)] * 3
    with pytest.raises(RetryError):
        readiness.verify_http("http://20.1.2.3", retries=3, delay=1)
    assert sleeps == [1, 1]


def test_ssh_probe_command(commands):
    assert readiness.ssh_probe("20.1.2.3", "azureuser", "/keys/k.pem", connect_timeout=5)
    command, kwargs = commands[0]
    assert command[0] == "ssh"
    assert "ConnectTimeout=5" in command
    assert command[command.index("-i") + 1] == "/keys/k.pem"
    assert command[-2:] == ["azureuser@20.1.2.3", "true"]
    assert kwargs["check"] is False


def test_wait_for_ssh_retries(commands, sleeps):
    commands.returncodes = [255, 255, 0]
    readiness.wait_for_ssh("20.1.2.3", "azureuser", "k.pem", retries=5, delay=30)
    assert len(commands) == 3
    assert sleeps == [30, 30]


def test_wait_for_ssh_gives_up(commands, sleeps):
    commands.returncodes = [255] * 2
    with pytest.raises(RetryError):
        readiness.wait_for_ssh("20.1.2.3", "azureuser", "k.pem", retries=2, delay=1)
