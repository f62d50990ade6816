from django.contrib import admin

from .models import GPBalance, Profile


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ("user", "display_name", "email_verified", "updated_at")
    list_filter = ("email_verified",)
    search_fields = ("user__username", "user__email", "display_name")


@admin.register(GPBalance)
class GPBalanceAdmin(admin.ModelAdmin):
    list_display = ("user", "balance", "updated_at")
    search_fields = ("user__username", "user__email")
    ordering = ("-balance",)
