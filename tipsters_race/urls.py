# tipsters_race/urls.py
from django.contrib import admin
from django.urls import path, include

from core import views as core_views

urlpatterns = [
    path("admin/", admin.site.urls),

    # liveness check
    path("health", core_views.health, name="health"),

    # JSON API consumed by the SPA
    path("api/", include("accounts.urls")),
    path("api/", include("matches.urls")),
    path("api/", include("betting.urls")),
    path("api/", include("advisors.urls")),
    path("api/", include("leaderboard.urls")),
    path("api/", include("core.urls")),
]
