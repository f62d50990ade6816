import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("matches", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="SavedBet",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("total_odds", models.DecimalField(decimal_places=3, max_digits=12)),
                ("stake", models.DecimalField(decimal_places=2, max_digits=14)),
                ("potential_win", models.DecimalField(decimal_places=2, max_digits=16)),
                ("is_settled", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("settled_at", models.DateTimeField(blank=True, null=True)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="saved_bets",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "indexes": [
                    models.Index(fields=["user", "created_at"], name="savedbet_user_created_idx"),
                    models.Index(fields=["is_settled"], name="savedbet_settled_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="BetSelection",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("market", models.CharField(max_length=80)),
                ("selection", models.CharField(max_length=80)),
                ("odd", models.DecimalField(decimal_places=3, max_digits=8)),
                (
                    "match",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="bet_selections",
                        to="matches.match",
                    ),
                ),
                (
                    "saved_bet",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="selections",
                        to="betting.savedbet",
                    ),
                ),
            ],
            options={"ordering": ("id",)},
        ),
    ]
