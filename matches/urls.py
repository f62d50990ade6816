# matches/urls.py
from django.urls import path
from . import views

app_name = "matches"

urlpatterns = [
    path("matches", views.match_list, name="list"),
    path("matches/date/<str:day>", views.match_list_for_date, name="by_date"),
    path("data/teams", views.teams, name="teams"),
]
