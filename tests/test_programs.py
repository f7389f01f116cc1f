"""
Tests for Carespace MCP program tools.
"""

import json
import pytest
from mcp.server.fastmcp import FastMCP

from carespace_mcp import programs
from carespace_mcp.sdk import types
from carespace_mcp.sdk.testing import MockResponse
from tests.conftest import get_tool_result_text
from tests.factories import exercise_dict, item_body, list_body, program_dict


@pytest.fixture
def app_with_programs():
    app = FastMCP("Test Carespace Programs")
    app = programs.register_tools(app)
    return app


@pytest.mark.asyncio
async def test_list_programs(app_with_programs, mock_transport):
    body = list_body("programs", [program_dict("p1", exercises=[exercise_dict("e1")])])
    mock_transport.set_response("GET", types.PROGRAMS, MockResponse.ok(body))

    result = await app_with_programs.call_tool("list_programs", {"category": "physical-therapy"})

    data = json.loads(get_tool_result_text(result))
    assert data["programs"][0]["exercise_count"] == 1
    assert "exercises" not in data["programs"][0]
    assert mock_transport.history[-1].query_params["category"] == "physical-therapy"


@pytest.mark.asyncio
async def test_get_program_orders_exercises(app_with_programs, mock_transport):
    exercises = [exercise_dict("e2", order=2, duration=45), exercise_dict("e1", order=1)]
    mock_transport.set_response("GET", "/programs/p1", MockResponse.ok(item_body(program_dict("p1", exercises=exercises))))

    result = await app_with_programs.call_tool("get_program", {"program_id": "p1"})

    data = json.loads(get_tool_result_text(result))
    assert [e["id"] for e in data["exercises"]] == ["e1", "e2"]
    assert data["exercises"][0]["duration"] == "1m 30s"
    assert data["exercises"][0]["rest"] == "1m"
    assert data["exercises"][1]["duration"] == "45s"


@pytest.mark.asyncio
async def test_get_program_server_error(app_with_programs, mock_transport):
    mock_transport.mock_server_error()

    result = await app_with_programs.call_tool("get_program", {"program_id": "p1"})

    data = json.loads(get_tool_result_text(result))
    assert data["error_type"] == "server"
    assert data["description"] == "Server error - please try again later"


@pytest.mark.asyncio
async def test_create_program(app_with_programs, mock_transport):
    mock_transport.set_response("POST", types.PROGRAMS, MockResponse.ok(item_body(program_dict("p9"))))

    result = await app_with_programs.call_tool(
        "create_program",
        {
            "name": "Shoulder Mobility",
            "difficulty": "beginner",
            "exercises": [
                {"name": "Pendulum", "sets": 2, "repetitions": 15},
                {"name": "Wall Walk", "sets": 3, "restTime": 30},
            ],
        },
    )

    data = json.loads(get_tool_result_text(result))
    assert data["success"] is True
    body = json.loads(mock_transport.last_request_body("POST", types.PROGRAMS))
    assert body["name"] == "Shoulder Mobility"
    assert [e["order"] for e in body["exercises"]] == [1, 2]
    assert body["exercises"][1]["restTime"] == 30


@pytest.mark.asyncio
async def test_create_program_missing_name(app_with_programs, mock_transport):
    result = await app_with_programs.call_tool("create_program", {"name": ""})

    data = json.loads(get_tool_result_text(result))
    assert data["error"] == "Missing program name"
    assert data["error_type"] == "validation"
    assert mock_transport.total_request_count() == 0


def test_program_tools_registered(app_with_programs):
    tool_names = list(app_with_programs._tool_manager._tools.keys())
    assert "list_programs" in tool_names
    assert "get_program" in tool_names
    assert "create_program" in tool_names
