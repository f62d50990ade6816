from django.urls import path
from . import views

app_name = "advisors"

urlpatterns = [
    path("tipsters/<int:tipster_id>/public-bets", views.tipster_public_bets, name="public_bets"),
    path("bets/<int:bet_id>/public-matches", views.bet_public_matches, name="public_matches"),
    path("bets/<int:bet_id>/unlock", views.unlock_bet, name="unlock"),
    path("paypal/create-order", views.paypal_create_order, name="paypal_create"),
    path("paypal/capture-order", views.paypal_capture_order, name="paypal_capture"),
    path("config/paypal-public", views.paypal_public_config, name="paypal_config"),
    path("advisor/wallet", views.advisor_wallet, name="wallet"),
    path("advisor/withdraw", views.advisor_withdraw, name="withdraw"),
]
