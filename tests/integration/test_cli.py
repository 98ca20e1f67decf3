"""Integration tests for the clickup-api CLI.

The real connection and policy pipeline run; only the HTTP transport is mocked.
"""

import json
from unittest.mock import patch

import httpx
import pytest

from clickup_api_client.cli import main
from clickup_api_client.connection import ApiConnection
from clickup_api_client.settings import Settings


@pytest.fixture
def serve():
    """Route CLI connections to ``handler`` and collect the requests made."""
    requests = []

    def install(handler):
        def recording(request):
            requests.append(request)
            return handler(request)

        def connection(settings=None, **kwargs):
            settings = Settings(_env_file=None, personal_access_token="pk_cli", retry_count=0)
            return ApiConnection(settings, transport=httpx.MockTransport(recording))

        patcher = patch("clickup_api_client.connection.get_connection", side_effect=connection)
        patcher.start()
        return requests

    yield install
    patch.stopall()


class TestApiCommand:
    def test_prints_json_response(self, serve, capsys):
        requests = serve(lambda request: httpx.Response(200, json={"user": {"id": 42}}))

        assert main(["api", "user"]) == 0

        assert json.loads(capsys.readouterr().out) == {"user": {"id": 42}}
        assert requests[0].method == "GET"
        assert requests[0].headers["authorization"] == "pk_cli"

    def test_sends_params_and_body(self, serve, capsys):
        requests = serve(lambda request: httpx.Response(200, json={"id": "t1"}))

        code = main(
            ["api", "list/901/task", "--method", "post", "--param", "custom_task_ids=true", "--data", '{"name": "x"}']
        )

        assert code == 0
        assert requests[0].method == "POST"
        assert requests[0].url.params["custom_task_ids"] == "true"
        assert json.loads(requests[0].content) == {"name": "x"}

    def test_rejects_invalid_json_body(self, serve, capsys):
        requests = serve(lambda request: httpx.Response(200, json={}))

        with pytest.raises(SystemExit) as excinfo:
            main(["api", "list/901/task", "--method", "post", "--data", "{name: x"])

        assert excinfo.value.code == 2
        assert "not valid JSON" in capsys.readouterr().err
        assert requests == []

    def test_reports_api_errors(self, serve, capsys):
        serve(lambda request: httpx.Response(401, json={"err": "Token invalid", "ECODE": "OAUTH_025"}))

        assert main(["api", "user"]) == 1

        err = capsys.readouterr().err
        assert err.startswith("error [authentication]:")
        assert "OAUTH_025" in err


class TestTasksCommand:
    @staticmethod
    def _list(request):
        page = int(request.url.params["page"])
        tasks = [{"id": f"{page}-{i}", "name": "t"} for i in range(2)]
        return httpx.Response(200, json={"tasks": tasks, "last_page": page == 1})

    def test_prints_single_page(self, serve, capsys):
        serve(self._list)

        assert main(["tasks", "901"]) == 0

        out = json.loads(capsys.readouterr().out)
        assert out["page"] == 0
        assert out["has_next_page"] is True
        assert [t["id"] for t in out["tasks"]] == ["0-0", "0-1"]

    def test_fetches_all_pages(self, serve, capsys):
        requests = serve(self._list)

        assert main(["tasks", "901", "--all"]) == 0

        out = json.loads(capsys.readouterr().out)
        assert [t["id"] for t in out] == ["0-0", "0-1", "1-0", "1-1"]
        assert len(requests) == 2


def test_no_command_prints_help(capsys):
    assert main([]) == 0
    assert "api" in capsys.readouterr().out
