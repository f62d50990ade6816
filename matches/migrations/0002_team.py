from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("matches", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Team",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("team_id", models.IntegerField(unique=True)),
                ("name", models.CharField(max_length=120)),
                ("logo_url", models.URLField(blank=True, default="")),
            ],
            options={"ordering": ("name", "team_id")},
        ),
    ]
