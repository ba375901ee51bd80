"""Tests for server wiring: health route, tools and lifespan."""

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastmcp import Client
from starlette.testclient import TestClient

from sshdeck.config import Config, HostKeyVerifier, Settings
from sshdeck.dependencies import Dependencies
from sshdeck.models import CommandResult, ConnectResponse
from sshdeck.server import create_server, make_lifespan
from sshdeck.services import SessionController


@pytest.fixture
def deps() -> Dependencies:
    """Dependencies backed by a mock transport."""
    transport = MagicMock()
    transport.connect = AsyncMock(
        return_value=ConnectResponse(
            success=True,
            message="Successfully connected and authenticated",
            session_id="root@10.0.0.5:22",
            current_directory="/root",
        )
    )
    transport.execute = AsyncMock(
        return_value=CommandResult(stdout="hello\n", stderr="", exit_status=0)
    )
    transport.disconnect = AsyncMock(return_value=True)
    transport.close_all = AsyncMock()

    config = Config(
        settings=Settings(log_colors=False),
        host_keys=HostKeyVerifier(known_hosts_path="none"),
    )
    return Dependencies(
        config=config,
        transport=transport,
        controller=SessionController(transport),
    )


def _text(result: Any) -> str:
    return result.content[0].text


class TestHealthCheck:
    """Tests for health check endpoint."""

    def test_health_returns_ok(self, deps: Dependencies) -> None:
        """Health endpoint returns OK as plain text."""
        client = TestClient(create_server(deps).http_app())

        response = client.get("/health")

        assert response.status_code == 200
        assert response.text == "OK"
        assert "text/plain" in response.headers["content-type"]


class TestTools:
    """Tools are registered and drive the controller."""

    @pytest.mark.asyncio
    async def test_tools_registered(self, deps: Dependencies) -> None:
        """All session tools are listed."""
        async with Client(create_server(deps)) as client:
            tools = await client.list_tools()

        assert {tool.name for tool in tools} == {
            "ssh_connect",
            "ssh_execute",
            "ssh_disconnect",
            "ssh_status",
            "ssh_transcript",
        }

    @pytest.mark.asyncio
    async def test_connect_execute_disconnect(self, deps: Dependencies) -> None:
        """A full session through the MCP surface."""
        async with Client(create_server(deps)) as client:
            connected = await client.call_tool(
                "ssh_connect",
                {"host": "10.0.0.5", "username": "root", "password": "x"},
            )
            executed = await client.call_tool("ssh_execute", {"command": "echo hello"})
            closed = await client.call_tool("ssh_disconnect", {})

        assert _text(connected).startswith("Connected to root@10.0.0.5:22")
        assert _text(executed) == "$ echo hello\nhello"
        assert _text(closed) == "Disconnected from root@10.0.0.5:22."
        deps.transport.execute.assert_awaited_once_with(
            "root@10.0.0.5:22", "echo hello"
        )


    @pytest.mark.asyncio
    async def test_unparseable_port_falls_back_to_default(
        self, deps: Dependencies
    ) -> None:
        """A non-numeric port reaches the resolver and becomes 22."""
        async with Client(create_server(deps)) as client:
            connected = await client.call_tool(
                "ssh_connect",
                {
                    "host": "10.0.0.5",
                    "username": "root",
                    "password": "x",
                    "port": "abc",
                },
            )

        assert _text(connected).startswith("Connected to root@10.0.0.5:22")
        config = deps.transport.connect.call_args.args[0]
        assert config.port == 22


class TestLifespan:
    """Lifespan cleanup."""

    @pytest.mark.asyncio
    async def test_lifespan_cleans_up(self, deps: Dependencies) -> None:
        """Shutdown closes the session and the transport."""
        server = create_server(deps)
        await deps.controller.connect(
            {"host": "10.0.0.5", "username": "root", "password": "x"}
        )

        async with make_lifespan(deps)(server) as state:
            assert state == {"deps": deps}

        deps.transport.disconnect.assert_awaited_once_with("root@10.0.0.5:22")
        deps.transport.close_all.assert_awaited()
        assert not deps.controller.is_connected
