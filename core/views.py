# core/views.py
from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.http import require_GET

from accounts.auth import admin_required
from .http import api_endpoint
from .reports import advisor_breakdown, financial_summary, recent_transactions


@require_GET
def health(request):
    return JsonResponse({"status": "ok", "server": "Tipsters Race API", "timestamp": timezone.now()})


@api_endpoint
@require_GET
@admin_required
def financial_stats(request):
    return JsonResponse(
        {
            "success": True,
            "summary": financial_summary(),
            "advisors": advisor_breakdown(),
            "transactions": recent_transactions(),
        }
    )
