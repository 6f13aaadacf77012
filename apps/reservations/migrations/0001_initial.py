import uuid

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='ShortStayReservation',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('property_ref', models.CharField(db_index=True, max_length=64)),
                ('property_title', models.CharField(blank=True, max_length=255, null=True)),
                ('property_location', models.CharField(blank=True, max_length=255, null=True)),
                ('property_price', models.CharField(blank=True, max_length=64, null=True)),
                ('property_location_type', models.CharField(blank=True, max_length=20, null=True)),
                ('status', models.CharField(choices=[('hold', 'En attente (hold)'), ('new', 'Nouvelle'), ('contacted', 'Client contacté'), ('confirmed', 'Confirmée'), ('cancelled', 'Annulée')], default='hold', max_length=16)),
                ('source', models.CharField(default='property_details', help_text='Origine de la demande (fiche bien, back-office, ...).', max_length=40)),
                ('lang', models.CharField(choices=[('fr', 'Français'), ('ar', 'Arabe')], default='fr', max_length=2)),
                ('reservation_option', models.CharField(blank=True, max_length=64, null=True)),
                ('reservation_option_label', models.CharField(blank=True, max_length=255, null=True)),
                ('check_in_date', models.DateField()),
                ('check_out_date', models.DateField()),
                ('nights', models.PositiveIntegerField(default=1, editable=False)),
                ('hold_expires_at', models.DateTimeField(blank=True, help_text='Fin de validité du hold; ignorée pour les autres statuts.', null=True)),
                ('customer_name', models.CharField(blank=True, max_length=255, null=True)),
                ('customer_phone', models.CharField(blank=True, max_length=32, null=True)),
                ('customer_email', models.EmailField(blank=True, max_length=254, null=True)),
                ('message', models.TextField(blank=True, null=True)),
                ('cancelled_at', models.DateTimeField(blank=True, null=True)),
                ('cancellation_reason', models.CharField(blank=True, max_length=255, null=True)),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('customer_user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='short_stay_reservations', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Réservation courte durée',
                'verbose_name_plural': 'Réservations courte durée',
                'db_table': 'short_stay_reservations',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['property_ref', 'status', 'check_in_date'], name='short_stay_property_idx'),
                    models.Index(fields=['status', 'hold_expires_at'], name='short_stay_hold_idx'),
                    models.Index(fields=['customer_email'], name='short_stay_email_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('check_out_date__gt', models.F('check_in_date'))), name='short_stay_reservations_valid_range'),
                ],
            },
        ),
    ]
