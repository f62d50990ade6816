# leaderboard/urls.py
from django.urls import path
from .views import share_tipster, tipsters

app_name = "leaderboard"

urlpatterns = [
    path("tipsters", tipsters, name="tipsters"),
    path("share/tipster/<int:tipster_id>", share_tipster, name="share_tipster"),
]
