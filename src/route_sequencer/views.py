from __future__ import annotations

import json
import logging
from typing import Any

from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST
from pydantic import ValidationError

from route_sequencer.exceptions import (
    DuplicateStopError,
    ExternalServiceError,
    InvalidCoordinateError,
    InvalidLocationError,
    UnknownStrategyError,
)
from route_sequencer.models import SavedRoute
from route_sequencer.schemas import RouteSequenceRequest
from route_sequencer.services.planner import RouteSequencerService

logger = logging.getLogger(__name__)

_sequencer_service: RouteSequencerService | None = None


def get_route_sequencer() -> RouteSequencerService:
    global _sequencer_service
    if _sequencer_service is None:
        _sequencer_service = RouteSequencerService()
    return _sequencer_service


@require_GET
def health_view(_: HttpRequest) -> HttpResponse:
    return JsonResponse({"status": "ok", "saved_routes": SavedRoute.objects.count()})


@csrf_exempt
@require_POST
def route_sequence_view(request: HttpRequest) -> HttpResponse:
    payload = _parse_json_payload(request)
    if isinstance(payload, JsonResponse):
        return payload

    try:
        sequence_request = RouteSequenceRequest.model_validate(payload)
    except ValidationError as exc:
        return JsonResponse(
            {
                "error": {
                    "code": "validation_error",
                    "message": "Invalid request payload",
                    "details": exc.errors(include_url=False, include_context=False),
                }
            },
            status=400,
        )

    sequencer = get_route_sequencer()
    try:
        response = sequencer.plan(sequence_request)
    except InvalidCoordinateError as exc:
        return _error_response("invalid_coordinate", str(exc), status=400)
    except DuplicateStopError as exc:
        return _error_response("duplicate_stop", str(exc), status=400)
    except UnknownStrategyError as exc:
        return _error_response("unknown_strategy", str(exc), status=400)
    except InvalidLocationError as exc:
        return _error_response("invalid_location", str(exc), status=400)
    except ExternalServiceError as exc:
        logger.error("Route sequencing failed upstream: %s", exc)
        return _error_response("upstream_error", str(exc), status=502)

    return JsonResponse(response.model_dump(mode="json"), status=200)


@require_GET
def latest_route_view(_: HttpRequest) -> HttpResponse:
    response = get_route_sequencer().latest()
    if response is None:
        return _error_response("not_found", "No route has been sequenced yet", status=404)
    return JsonResponse(response.model_dump(mode="json"), status=200)


def _parse_json_payload(request: HttpRequest) -> dict[str, Any] | JsonResponse:
    if not request.body:
        return {}

    try:
        payload = json.loads(request.body)
    except json.JSONDecodeError:
        return _error_response("invalid_json", "Request body must be valid JSON", status=400)

    if not isinstance(payload, dict):
        return _error_response("invalid_json", "JSON body must be an object", status=400)

    return payload


def _error_response(code: str, message: str, status: int) -> JsonResponse:
    return JsonResponse({"error": {"code": code, "message": message}}, status=status)
