from django.urls import path
from . import views

app_name = "core"

urlpatterns = [
    path("admin/financial-stats", views.financial_stats, name="financial_stats"),
]
