"""Range exclusion constraint on PostgreSQL.

Two non-cancelled reservations of the same property may not share a
night. Other backends rely on the serialized writer alone.
"""

from django.db import migrations

CONSTRAINT_NAME = "short_stay_reservations_no_overlap"


def add_exclusion_constraint(apps, schema_editor):
    if schema_editor.connection.vendor != "postgresql":
        return
    schema_editor.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")
    schema_editor.execute(
        f"ALTER TABLE short_stay_reservations ADD CONSTRAINT {CONSTRAINT_NAME} "
        "EXCLUDE USING gist ("
        "property_ref WITH =, "
        "daterange(check_in_date, check_out_date, '[)') WITH &&"
        ") WHERE (status <> 'cancelled')"
    )


def drop_exclusion_constraint(apps, schema_editor):
    if schema_editor.connection.vendor != "postgresql":
        return
    schema_editor.execute(
        f"ALTER TABLE short_stay_reservations DROP CONSTRAINT IF EXISTS {CONSTRAINT_NAME}"
    )


class Migration(migrations.Migration):

    dependencies = [
        ('reservations', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(add_exclusion_constraint, drop_exclusion_constraint),
    ]
