from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Property",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("ref", models.CharField(max_length=64, unique=True)),
                ("title", models.CharField(blank=True, max_length=255)),
                ("location", models.CharField(blank=True, max_length=255)),
                (
                    "price",
                    models.CharField(
                        blank=True,
                        help_text="Prix affiché, tel que saisi dans le catalogue.",
                        max_length=64,
                    ),
                ),
                (
                    "location_type",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("par_nuit", "Location par nuit"),
                            ("par_mois", "Location par mois"),
                            ("six_mois", "Location six mois"),
                            ("douze_mois", "Location douze mois"),
                        ],
                        max_length=20,
                    ),
                ),
                ("is_published", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Bien",
                "verbose_name_plural": "Biens",
                "ordering": ["-created_at"],
            },
        ),
    ]
