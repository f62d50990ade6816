# matches/admin.py
from django.contrib import admin
from .models import LeaguePriority, Match, MatchOdd, Team


class MatchOddInline(admin.TabularInline):
    model = MatchOdd
    extra = 0


@admin.register(LeaguePriority)
class LeaguePriorityAdmin(admin.ModelAdmin):
    list_display = ("league_id", "name", "priority")
    search_fields = ("name", "league_id")


@admin.register(Match)
class MatchAdmin(admin.ModelAdmin):
    list_display = (
        "fixture_id",
        "league_name",
        "fixture_date",
        "home_team",
        "away_team",
        "status",
        "goals_home",
        "goals_away",
        "minute",
        "updated_at",
    )
    list_filter = ("status", "league_name")

    # BetSelectionInline autocompletes on match
    search_fields = ("fixture_id", "home_team", "away_team", "league_name")
    inlines = [MatchOddInline]


@admin.register(Team)
class TeamAdmin(admin.ModelAdmin):
    list_display = ("team_id", "name", "logo_url")
    search_fields = ("name", "team_id")
