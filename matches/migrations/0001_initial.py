import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="LeaguePriority",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("league_id", models.IntegerField(unique=True)),
                ("name", models.CharField(blank=True, default="", max_length=120)),
                ("priority", models.IntegerField(default=1000)),
            ],
            options={"ordering": ("priority", "league_id")},
        ),
        migrations.CreateModel(
            name="Match",
            fields=[
                ("fixture_id", models.BigIntegerField(primary_key=True, serialize=False)),
                ("league_id", models.IntegerField(blank=True, db_index=True, null=True)),
                ("league_name", models.CharField(blank=True, default="", max_length=120)),
                ("home_team_id", models.IntegerField(blank=True, null=True)),
                ("home_team", models.CharField(max_length=120)),
                ("home_logo", models.URLField(blank=True, default="")),
                ("away_team_id", models.IntegerField(blank=True, null=True)),
                ("away_team", models.CharField(max_length=120)),
                ("away_logo", models.URLField(blank=True, default="")),
                ("fixture_date", models.DateTimeField(db_index=True)),
                (
                    "status",
                    models.CharField(
                        choices=[
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
                        ],
                        db_index=True,
                        default="NS",
                        max_length=10,
                    ),
                ),
                ("goals_home", models.IntegerField(blank=True, null=True)),
                ("goals_away", models.IntegerField(blank=True, null=True)),
                ("minute", models.IntegerField(blank=True, null=True)),
                ("priority", models.IntegerField(blank=True, null=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={"ordering": ("fixture_date", "fixture_id")},
        ),
        migrations.CreateModel(
            name="MatchOdd",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("bookmaker_id", models.IntegerField(default=8)),
                ("market", models.CharField(max_length=80)),
                ("selection", models.CharField(max_length=80)),
                ("odd", models.DecimalField(decimal_places=3, max_digits=8)),
                (
                    "match",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="odds",
                        to="matches.match",
                    ),
                ),
            ],
            options={
                "indexes": [models.Index(fields=["match", "bookmaker_id"], name="matchodd_match_bookmaker_idx")],
            },
        ),
    ]
