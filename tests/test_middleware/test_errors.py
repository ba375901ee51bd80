"""Tests for error handling middleware."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from sshdeck.exceptions import SessionLost
from sshdeck.middleware.errors import ErrorHandlingMiddleware


@pytest.fixture
def error_middleware() -> ErrorHandlingMiddleware:
    """Create an error handling middleware instance."""
    return ErrorHandlingMiddleware()


@pytest.fixture
def mock_context() -> MagicMock:
    """Create a mock middleware context."""
    context = MagicMock()
    context.method = "tools/call"
    context.message = MagicMock()
    context.message.name = "ssh_execute"
    return context


@pytest.mark.asyncio
async def test_passes_through_success(
    error_middleware: ErrorHandlingMiddleware,
    mock_context: MagicMock,
) -> None:
    """Successful handlers are untouched."""
    call_next = AsyncMock(return_value="success")

    result = await error_middleware.on_message(mock_context, call_next)

    assert result == "success"
    assert error_middleware.get_error_stats() == {}


@pytest.mark.asyncio
async def test_logs_and_reraises(mock_context: MagicMock) -> None:
    """Errors are logged with the MCP method and re-raised."""
    mock_logger = MagicMock()
    middleware = ErrorHandlingMiddleware(logger=mock_logger)
    call_next = AsyncMock(side_effect=SessionLost("Connection closed by remote host"))

    with pytest.raises(SessionLost):
        await middleware.on_message(mock_context, call_next)

    mock_logger.error.assert_called_once()
    args = mock_logger.error.call_args.args
    assert args[1] == "tools/call"
    assert args[2] == "SessionLost"


@pytest.mark.asyncio
async def test_traceback_included_when_enabled(mock_context: MagicMock) -> None:
    """include_traceback appends the formatted traceback."""
    mock_logger = MagicMock()
    middleware = ErrorHandlingMiddleware(logger=mock_logger, include_traceback=True)
    call_next = AsyncMock(side_effect=ValueError("test error"))

    with pytest.raises(ValueError):
        await middleware.on_message(mock_context, call_next)

    assert "Traceback" in mock_logger.error.call_args.args[-1]


@pytest.mark.asyncio
async def test_tracks_and_resets_stats(
    error_middleware: ErrorHandlingMiddleware,
    mock_context: MagicMock,
) -> None:
    """Errors are counted per exception type."""
    for _ in range(2):
        with pytest.raises(ValueError):
            await error_middleware.on_message(
                mock_context, AsyncMock(side_effect=ValueError("bad"))
            )
    with pytest.raises(KeyError):
        await error_middleware.on_message(
            mock_context, AsyncMock(side_effect=KeyError("missing"))
        )

    assert error_middleware.get_error_stats() == {"ValueError": 2, "KeyError": 1}

    error_middleware.reset_stats()
    assert error_middleware.get_error_stats() == {}
