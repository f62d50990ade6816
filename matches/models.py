# matches/models.py
from django.db import models


class LeaguePriority(models.Model):
    """Lower priority = listed first on the match board."""

    league_id = models.IntegerField(unique=True)
    name = models.CharField(max_length=120, blank=True, default="")
    priority = models.IntegerField(default=1000)

    class Meta:
        ordering = ("priority", "league_id")

    def __str__(self):
        return f"{self.name or self.league_id} priority={self.priority}"


class Team(models.Model):
    """Team registry from the data provider; optional, the team list falls back to matches."""

    team_id = models.IntegerField(unique=True)
    name = models.CharField(max_length=120)
    logo_url = models.URLField(blank=True, default="")

    class Meta:
        ordering = ("name", "team_id")

    def __str__(self):
        return f"{self.name} ({self.team_id})"


class Match(models.Model):
    """
    A football fixture fed by the external data provider.
    The betting core only reads it (status, goals, minute).
    """

    STATUS_CHOICES = (
        ("NS", "Not Started"),
        ("1H", "First Half"),
        ("HT", "Half Time"),
        ("2H", "Second Half"),
        ("ET", "Extra Time"),
        ("P", "Penalties"),
        ("FT", "Full Time"),
        ("AET", "After Extra Time"),
        ("PEN", "After Penalties"),
        ("PST", "Postponed"),
        ("CANC", "Cancelled"),
    )
    FINISHED = "FT"

    fixture_id = models.BigIntegerField(primary_key=True)

    league_id = models.IntegerField(null=True, blank=True, db_index=True)
    league_name = models.CharField(max_length=120, blank=True, default="")

    home_team_id = models.IntegerField(null=True, blank=True)
    home_team = models.CharField(max_length=120)
    home_logo = models.URLField(blank=True, default="")
    away_team_id = models.IntegerField(null=True, blank=True)
    away_team = models.CharField(max_length=120)
    away_logo = models.URLField(blank=True, default="")

    fixture_date = models.DateTimeField(db_index=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default="NS", db_index=True)

    goals_home = models.IntegerField(null=True, blank=True)
    goals_away = models.IntegerField(null=True, blank=True)
    minute = models.IntegerField(null=True, blank=True)

    priority = models.IntegerField(null=True, blank=True)

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("fixture_date", "fixture_id")

    def __str__(self):
        return f"{self.home_team} - {self.away_team} ({self.fixture_id}) {self.status}"


class MatchOdd(models.Model):
    """One raw (market, selection, odd) row as delivered by a bookmaker."""

    match = models.ForeignKey(Match, on_delete=models.CASCADE, related_name="odds")
    bookmaker_id = models.IntegerField(default=8)
    market = models.CharField(max_length=80)
    selection = models.CharField(max_length=80)
    odd = models.DecimalField(max_digits=8, decimal_places=3)

    class Meta:
        indexes = [models.Index(fields=["match", "bookmaker_id"], name="matchodd_match_bookmaker_idx")]

    def __str__(self):
        return f"{self.match_id} {self.market}/{self.selection} @ {self.odd}"
