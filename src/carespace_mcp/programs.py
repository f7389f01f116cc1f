"""
Rehabilitation program tools for Carespace MCP server.

Programs are ordered lists of exercises assigned to clients.
"""

import json
from typing import List, Optional

from fastmcp import Context

from carespace_mcp.bridge import wait_for
from carespace_mcp.client_factory import get_api, failure_response
from carespace_mcp.sdk.models import Exercise, Program
from carespace_mcp.utils import format_duration


def _format_exercise(exercise: Exercise) -> dict:
    return {
        "id": exercise.id,
        "order": exercise.order,
        "name": exercise.name,
        "instructions": exercise.instructions or exercise.description,
        "sets": exercise.sets,
        "repetitions": exercise.repetitions,
        "duration": format_duration(exercise.duration),
        "rest": format_duration(exercise.rest_time),
        "video_url": exercise.video_url or None,
    }


def _format_program(program: Program, detailed: bool = False) -> dict:
    result = {
        "id": program.id,
        "name": program.name,
        "category": program.category,
        "difficulty": program.difficulty,
        "duration": program.duration,
        "is_template": program.is_template,
        "exercise_count": len(program.exercises),
    }
    if detailed:
        result["description"] = program.description
        result["exercises"] = [
            _format_exercise(e) for e in sorted(program.exercises, key=lambda e: e.order)
        ]
    return result


def register_tools(app):
    """Register program tools with the MCP app."""

    @app.tool()
    async def list_programs(ctx: Context, page: int = 1, limit: int = 20, category: str = "") -> str:
        """
        List rehabilitation programs.

        Args:
            page: Page number, starting at 1
            limit: Programs per page
            category: Optional category filter (e.g. "physical-therapy")

        Returns:
            JSON with programs on the requested page
        """
        with get_api(ctx) as api:
            result = await wait_for(api.get_programs, page=page, limit=limit, category=category)

        if not result.success:
            return failure_response(ctx, result.error)

        return json.dumps({
            "page": page,
            "count": len(result.data),
            "programs": [_format_program(p) for p in result.data],
        }, indent=2)

    @app.tool()
    async def get_program(program_id: str, ctx: Context) -> str:
        """
        Get a program with its exercises in order.

        Args:
            program_id: Carespace program id

        Returns:
            JSON with the program and its exercises
        """
        with get_api(ctx) as api:
            result = await wait_for(api.get_program, program_id)

        if not result.success:
            return failure_response(ctx, result.error)
        return json.dumps(_format_program(result.data, detailed=True), indent=2)

    @app.tool()
    async def create_program(
        name: str,
        ctx: Context,
        description: str = "",
        category: str = "",
        difficulty: str = "",
        duration: int = 0,
        exercises: Optional[List[dict]] = None,
    ) -> str:
        """
        Create a rehabilitation program.

        Args:
            name: Program name
            description: What the program addresses
            category: Category (e.g. "physical-therapy")
            difficulty: "beginner", "intermediate", or "advanced"
            duration: Program length in days
            exercises: Exercise dicts using API field names, e.g.
                [{"name": "Squat", "sets": 3, "repetitions": 10, "restTime": 60}]

        Returns:
            JSON with the created program
        """
        program = Program(
            name=name,
            description=description,
            category=category,
            difficulty=difficulty,
            duration=duration,
            exercises=[
                Exercise.from_dict({"order": i + 1, **e}) for i, e in enumerate(exercises or [])
            ],
        )
        with get_api(ctx) as api:
            result = await wait_for(api.create_program, program)

        if not result.success:
            return failure_response(ctx, result.error)
        return json.dumps({"success": True, "program": _format_program(result.data, detailed=True)}, indent=2)

    return app
