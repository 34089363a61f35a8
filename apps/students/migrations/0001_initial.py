import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Student',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('student_id', models.CharField(editable=False, max_length=20)),
                ('title', models.CharField(max_length=10)),
                ('name', models.CharField(max_length=150)),
                ('father_name', models.CharField(blank=True, max_length=150)),
                ('mobile', models.CharField(max_length=20)),
                ('photo_url', models.CharField(max_length=500)),
                ('admission_type', models.CharField(choices=[('Full-time', 'Full-time'), ('Half-time', 'Half-time')], max_length=20)),
                ('shift', models.CharField(blank=True, choices=[('morning', 'Morning'), ('evening', 'Evening')], max_length=10, null=True)),
                ('seat_number', models.PositiveIntegerField()),
                ('admission_date', models.DateField()),
                ('fee_amount', models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('next_due_date', models.DateField()),
                ('payment_history', models.JSONField(blank=True, default=list)),
                ('received_credit_log', models.JSONField(blank=True, default=list)),
                ('status', models.CharField(choices=[('active', 'Active'), ('departed', 'Departed')], default='active', max_length=10)),
                ('departure_date', models.DateField(blank=True, null=True)),
                ('departure_reason', models.CharField(blank=True, max_length=255, null=True)),
                ('transfer_log', models.JSONField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='students', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'students',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['owner', 'status'], name='students_owner_status_idx'),
                    models.Index(fields=['owner', 'next_due_date'], name='students_owner_due_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('owner', 'student_id'), name='unique_student_id_per_owner'),
                ],
            },
        ),
        migrations.CreateModel(
            name='FeeStructure',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('full_time_fee', models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('half_time_fee', models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('owner', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='fee_structure', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'fee_structures',
            },
        ),
    ]
