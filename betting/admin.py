# betting/admin.py
from django.contrib import admin

from .models import BetSelection, SavedBet


class BetSelectionInline(admin.TabularInline):
    model = BetSelection
    extra = 0
    autocomplete_fields = ("match",)


@admin.register(SavedBet)
class SavedBetAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "user",
        "selection_count",
        "total_odds",
        "stake",
        "potential_win",
        "is_settled",
        "created_at",
        "settled_at",
    )
    list_filter = ("is_settled", "created_at")
    search_fields = ("user__username", "user__email")
    autocomplete_fields = ("user",)
    inlines = [BetSelectionInline]

    @admin.display(description="Selections")
    def selection_count(self, obj: SavedBet) -> int:
        return obj.selections.count()
