"""
Tests for API Pydantic schemas and OpenAPI generation.
"""

import pytest
from pydantic import ValidationError


class TestPydanticSchemas:
    """Tests for request/response models."""

    def test_draft_request_schema(self):
        """HuntDraftRequest parses nested puzzles, nodes and choices."""
        from cipherhunt.api.schemas import HuntDraftRequest

        request = HuntDraftRequest.model_validate({
            "title": "Fork",
            "puzzles": [{"local_id": "p1", "cipher_kind": "atbash", "solution": "yes"}],
            "nodes": [
                {
                    "local_id": "c1",
                    "node_kind": "choice",
                    "content": {"prompt": "Which way?"},
                    "choices": [{"text": "Left", "target_node_id": "n2"}],
                    "is_starting_node": True,
                },
            ],
        })

        assert request.difficulty == "medium"
        assert request.puzzles[0].clue_text is None
        assert request.nodes[0].choices[0].target_node_id == "n2"

    def test_puzzle_schema_limits(self):
        """Puzzles reject negative points and a third hint."""
        from cipherhunt.api.schemas import PuzzleSchema

        with pytest.raises(ValidationError):
            PuzzleSchema(local_id="p", cipher_kind="caesar", solution="x", points=-1)

        with pytest.raises(ValidationError):
            PuzzleSchema(
                local_id="p",
                cipher_kind="caesar",
                solution="x",
                hints=[{"text": "a"}, {"text": "b"}, {"text": "c"}],
            )

    def test_play_request_validation(self):
        """Choice and hint indexes are bounded."""
        from cipherhunt.api.schemas import ChoiceRequest, HintRequest

        with pytest.raises(ValidationError):
            ChoiceRequest(choice_index=-1)
        with pytest.raises(ValidationError):
            HintRequest(hint_index=2)

        assert HintRequest(hint_index=1).hint_index == 1

    def test_progress_info_from_record(self):
        """ProgressInfo reads a progress record's attributes."""
        from cipherhunt.api.schemas import ProgressInfo
        from cipherhunt.play import ProgressStatus, UserHuntProgress

        progress = UserHuntProgress.begin("u1", "h1", "n1", now=5.0)
        info = ProgressInfo.model_validate(progress)

        assert info.status is ProgressStatus.STARTED
        assert info.visited_path == ["n1"]
        assert info.started_at == 5.0

    def test_progress_status_is_engine_enum(self):
        """ProgressInfo exposes the engine's own status enum."""
        from cipherhunt.api.schemas import ProgressInfo
        from cipherhunt.play import ProgressStatus

        assert ProgressInfo.model_fields["status"].annotation is ProgressStatus
        info = ProgressInfo(user_id="u1", hunt_id="h1", status="abandoned")
        assert info.status is ProgressStatus.ABANDONED

    def test_play_response_schema(self):
        """PlayResponse serializes with nested node and outcome."""
        from cipherhunt.api.schemas import (
            ChoiceInfo,
            NodeInfo,
            OutcomeInfo,
            PlayResponse,
            ProgressInfo,
        )

        response = PlayResponse(
            progress=ProgressInfo(user_id="u1", hunt_id="h1", current_node_id="n1", status="in_progress"),
            node=NodeInfo(
                node_id="n1",
                node_kind="choice",
                content={"prompt": "Which way?"},
                choices=[ChoiceInfo(index=0, text="Left"), ChoiceInfo(index=2, text="Right")],
            ),
            outcome=OutcomeInfo(success=True, feedback="It is cold."),
        )

        data = response.model_dump(mode="json")
        assert data["progress"]["status"] == "in_progress"
        assert [c["index"] for c in data["node"]["choices"]] == [0, 2]
        assert data["outcome"]["correct"] is None
        assert data["puzzle"] is None
        assert data["api_version"] == "v1"

    def test_error_response_schema(self):
        """ErrorResponse has structured error codes."""
        from cipherhunt.api.schemas import ErrorResponse, ErrorCode

        error = ErrorResponse(
            error="User u1 has not started hunt h1",
            error_code=ErrorCode.PROGRESS_NOT_FOUND,
            details={"hunt_id": "h1"},
        )

        data = error.model_dump()
        assert data["error_code"] == "PROGRESS_NOT_FOUND"
        assert data["details"]["hunt_id"] == "h1"
        assert data["api_version"] == "v1"

    def test_error_code_values_are_strings(self):
        """Error codes are string enums for JSON serialization."""
        from cipherhunt.api.schemas import ErrorCode

        for code in ErrorCode:
            assert isinstance(code.value, str)
            assert code.value == code.value.upper()


class TestOpenAPISchema:
    """Tests for OpenAPI schema generation."""

    def test_openapi_schema_generates(self):
        """OpenAPI schema generates without errors."""
        from cipherhunt.api.app import app
        from fastapi.openapi.utils import get_openapi

        schema = get_openapi(
            title=app.title,
            version=app.version,
            routes=app.routes,
        )

        assert "paths" in schema
        assert "components" in schema
        assert "schemas" in schema["components"]

    def test_response_models_in_schema(self):
        """Response models appear in OpenAPI schema."""
        from cipherhunt.api.app import app
        from fastapi.openapi.utils import get_openapi

        schema = get_openapi(
            title=app.title,
            version=app.version,
            routes=app.routes,
        )

        schemas = schema["components"]["schemas"]
        for name in [
            "CipherListResponse",
            "CipherResponse",
            "HuntValidationResponse",
            "PublishResponse",
            "PlayResponse",
            "ErrorResponse",
        ]:
            assert name in schemas, f"Missing schema: {name}"

    def test_endpoints_have_response_models(self):
        """Main endpoints are routed and documented."""
        from cipherhunt.api.app import app
        from fastapi.openapi.utils import get_openapi

        schema = get_openapi(
            title=app.title,
            version=app.version,
            routes=app.routes,
        )
        paths = schema["paths"]

        assert "200" in paths["/api/v1/hunts"]["post"]["responses"]
        assert "400" in paths["/api/v1/hunts"]["post"]["responses"]
        assert "200" in paths["/api/v1/ciphers/{kind}/encode"]["post"]["responses"]

        play = "/api/v1/hunts/{hunt_id}/players/{user_id}"
        for action in ["start", "advance", "choose", "attempt", "action", "hint", "back", "abandon", "restart"]:
            assert f"{play}/{action}" in paths, f"Missing endpoint: {action}"
            assert "409" in paths[f"{play}/{action}"]["post"]["responses"]
        assert "get" in paths[play]

    def test_create_app_with_service(self):
        """create_app accepts an injected service."""
        from cipherhunt.api.app import create_app
        from cipherhunt.api.service import APIService
        from cipherhunt.config import Settings

        app = create_app(APIService(settings=Settings(allowed_origins=("https://example.org",))))
        assert app.title == "Cipher Hunt API"
