from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="FeatureExtreme",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("feature", models.CharField(max_length=64, unique=True)),
                ("highest_track_id", models.CharField(max_length=64)),
                ("highest_track_name", models.CharField(blank=True, max_length=255)),
                ("highest_value", models.FloatField(blank=True, null=True)),
                ("lowest_track_id", models.CharField(max_length=64)),
                ("lowest_track_name", models.CharField(blank=True, max_length=255)),
                ("lowest_value", models.FloatField(blank=True, null=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ("feature",),
            },
        ),
    ]
