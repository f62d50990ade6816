from decimal import Decimal

from accounts.models import GPBalance
from advisors.models import AdvisorWallet


def gp(user) -> Decimal:
    return GPBalance.objects.get(user=user).balance


def euro(user) -> Decimal:
    return AdvisorWallet.objects.get(user=user).balance_euro
