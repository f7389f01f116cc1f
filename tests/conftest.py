"""
Shared pytest fixtures for Carespace MCP testing.
"""
import json
import pytest
from unittest.mock import Mock, patch

# Monkey-patch: production uses fastmcp.FastMCP, tests use mcp.server.fastmcp.
# Patch fastmcp.Context to match mcp.server.fastmcp.Context so tools work
# with the test FastMCP.
import fastmcp
from mcp.server.fastmcp import server as mcp_server
fastmcp.Context = mcp_server.Context

from carespace_mcp.client_factory import parse_tokens
from carespace_mcp.sdk.api import CarespaceAPI
from carespace_mcp.sdk.testing import MockTransport

TOOL_MODULES = [
    "carespace_mcp.auth_tool",
    "carespace_mcp.users",
    "carespace_mcp.clients",
    "carespace_mcp.programs",
]


def get_tool_result_text(result):
    """Extract text from tool result.

    FastMCP call_tool returns a tuple (list_of_TextContent, metadata_dict).
    This helper extracts the text from the first TextContent item.
    """
    # Handle tuple return: (content_list, metadata)
    if isinstance(result, tuple) and len(result) > 0:
        result = result[0]
    if isinstance(result, list) and len(result) > 0:
        if hasattr(result[0], 'text'):
            return result[0].text
    return str(result)


@pytest.fixture
def mock_transport():
    """In-memory transport; completions fire synchronously."""
    return MockTransport()


@pytest.fixture
def mock_api(mock_transport):
    """CarespaceAPI wired to the mock transport."""
    return CarespaceAPI(
        base_url="https://api.test.carespace.ai",
        api_key="test_access_token",
        transport=mock_transport,
    )


@pytest.fixture(autouse=True)
def mock_get_api(mock_api):
    """Auto-mock client_factory.get_api in all tool modules.

    Yields the mock function (not the API) so tests can set side_effect
    for error scenarios like "not logged in".
    """
    get_api_fn = Mock(return_value=mock_api)

    patchers = []
    for module in TOOL_MODULES:
        p = patch(f"{module}.get_api", get_api_fn)
        p.start()
        patchers.append(p)

    yield get_api_fn

    for p in patchers:
        p.stop()


@pytest.fixture(autouse=True)
def session_store():
    """Replace the on-disk session store with a dict.

    The test FastMCP Context has no state API, so session writes are
    captured here instead.
    """
    store = {}

    def set_tokens(ctx, tokens):
        parse_tokens(tokens)
        store["tokens"] = tokens

    def clear_tokens(ctx):
        store.pop("tokens", None)

    targets = [
        ("carespace_mcp.client_factory.set_session_tokens", set_tokens),
        ("carespace_mcp.client_factory.clear_session_tokens", clear_tokens),
        ("carespace_mcp.auth_tool.set_session_tokens", set_tokens),
        ("carespace_mcp.auth_tool.clear_session_tokens", clear_tokens),
    ]
    patchers = [patch(target, fn) for target, fn in targets]
    for p in patchers:
        p.start()

    yield store

    for p in patchers:
        p.stop()


@pytest.fixture
def mock_context():
    """Create a mock MCP context with state management."""
    context = Mock()
    state = {}

    def get_state(key):
        return state.get(key)

    def set_state(key, value):
        state[key] = value

    context.get_state = get_state
    context.set_state = set_state
    context.session_id = "test-session-123"
    context._state = state

    return context


@pytest.fixture
def carespace_tokens():
    """Sample Carespace tokens for session restoration."""
    return json.dumps({
        "access_token": "test_access_token",
        "refresh_token": "test_refresh_token",
    })
