# leaderboard/views.py
from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db.models import Count, DecimalField, Value
from django.db.models.functions import Coalesce
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.shortcuts import render
from django.views.decorators.http import require_GET

from accounts.models import DEFAULT_GP_BALANCE, current_balance, display_name_for
from advisors.pricing import is_advisor
from core.http import api_endpoint

LIMIT = 100


@api_endpoint
@require_GET
def tipsters(request: HttpRequest) -> JsonResponse:
    """
    Public ranking: GP balance first, then number of slips played.
    Users without a balance row yet count with the starting 100 GP.
    """
    rows = (
        get_user_model().objects.filter(is_active=True)
        .select_related("profile")
        .annotate(
            balance=Coalesce(
                "gp_balance__balance",
                Value(DEFAULT_GP_BALANCE),
                output_field=DecimalField(max_digits=14, decimal_places=2),
            ),
            total_bets=Count("saved_bets", distinct=True),
        )
        .order_by("-balance", "-total_bets", "pk")[:LIMIT]
    )

    data = [
        {
            "id": u.pk,
            "displayName": display_name_for(u),
            "balance": Decimal(u.balance),
            "total_bets": u.total_bets,
            "isAdvisor": is_advisor(u.balance),
        }
        for u in rows
    ]
    return JsonResponse({"success": True, "data": data})


@require_GET
def share_tipster(request: HttpRequest, tipster_id: int) -> HttpResponse:
    """
    Open Graph page for link previews of a tipster profile; people land on
    the SPA profile through a meta refresh.
    """
    site = settings.SHARE_SITE_URL
    tipster = get_user_model().objects.select_related("profile").filter(pk=tipster_id).first()

    if tipster is None:
        name = "Tipster"
        balance = 0
        redirect_url = f"{site}/tipsters"
    else:
        name = display_name_for(tipster)
        balance = int(current_balance(tipster.pk))
        redirect_url = f"{site}/tipster/{tipster.pk}"

    if is_advisor(balance):
        title = f"🏆 Segui {name}, Advisor Certificato"
    else:
        title = f"⚽ Pronostici di {name} - Tipsters Race"

    context = {
        "name": name,
        "title": title,
        "description": f"Saldo attuale: GP {balance:,} | Unisciti alla Tipsters Race e segui le migliori schedine!",
        "site_url": site,
        "share_url": f"{site}/api/share/tipster/{tipster_id}",
        "image_url": f"{site}/stadium-share.jpg",
        "redirect_url": redirect_url,
    }
    return render(request, "leaderboard/share_tipster.html", context)
