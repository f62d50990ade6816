from django.contrib import admin, messages

from .models import AdvisorWallet, BetLock, Transaction
from .services import complete_withdrawal, reject_withdrawal


@admin.register(AdvisorWallet)
class AdvisorWalletAdmin(admin.ModelAdmin):
    list_display = ("user", "balance_euro", "updated_at")
    search_fields = ("user__username", "user__email")


@admin.register(BetLock)
class BetLockAdmin(admin.ModelAdmin):
    list_display = ("user", "saved_bet", "purchased_price", "payment_ref", "created_at")
    search_fields = ("user__username", "user__email", "payment_ref")
    raw_id_fields = ("user", "saved_bet")


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "tx_type", "status", "amount", "payment_email", "created_at", "processed_at")
    list_filter = ("tx_type", "status")
    search_fields = ("user__username", "user__email", "payment_email")
    actions = ["mark_completed", "reject"]

    @admin.action(description="Mark selected withdrawals as paid out")
    def mark_completed(self, request, queryset):
        done = sum(1 for tx_id in queryset.values_list("pk", flat=True) if complete_withdrawal(tx_id))
        self.message_user(request, f"{done} withdrawal(s) completed.", messages.SUCCESS)

    @admin.action(description="Reject selected withdrawals (refund wallet)")
    def reject(self, request, queryset):
        done = sum(1 for tx_id in queryset.values_list("pk", flat=True) if reject_withdrawal(tx_id))
        self.message_user(request, f"{done} withdrawal(s) rejected and refunded.", messages.WARNING)
