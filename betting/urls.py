# betting/urls.py
from django.urls import path
from . import views

app_name = "betting"

urlpatterns = [
    path("saved-bets", views.saved_bets, name="saved_bets"),
]
