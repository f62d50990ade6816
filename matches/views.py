# matches/views.py
from __future__ import annotations

from datetime import date

from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_GET

from core.errors import InvalidInput
from core.http import api_endpoint
from .services import matches_on, team_list, upcoming_matches


@api_endpoint
@require_GET
def match_list(request: HttpRequest) -> JsonResponse:
    data = upcoming_matches()
    return JsonResponse({"success": True, "count": len(data), "data": data})


@api_endpoint
@require_GET
def match_list_for_date(request: HttpRequest, day: str) -> JsonResponse:
    try:
        parsed = date.fromisoformat(day)
    except ValueError:
        raise InvalidInput("Data non valida (YYYY-MM-DD)")

    data = matches_on(parsed)
    return JsonResponse({"success": True, "date": day, "count": len(data), "data": data})


@api_endpoint
@require_GET
def teams(request: HttpRequest) -> JsonResponse:
    return JsonResponse({"success": True, "teams": team_list()})
