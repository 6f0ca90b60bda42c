import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Customer",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="cree le")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="modifie le")),
                ("name", models.CharField(max_length=200, verbose_name="nom")),
                ("industry", models.CharField(blank=True, default="", max_length=120, verbose_name="secteur")),
                ("location", models.CharField(blank=True, default="", max_length=200, verbose_name="localisation")),
                ("contact", models.CharField(blank=True, default="", max_length=200, verbose_name="contact")),
            ],
            options={
                "verbose_name": "client",
                "verbose_name_plural": "clients",
                "ordering": ["name"],
            },
        ),
    ]
