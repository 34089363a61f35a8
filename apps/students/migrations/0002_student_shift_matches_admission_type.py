from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('students', '0001_initial'),
    ]

    operations = [
        migrations.AddConstraint(
            model_name='student',
            constraint=models.CheckConstraint(
                condition=(
                    models.Q(admission_type='Full-time', shift__isnull=True)
                    | models.Q(admission_type='Half-time', shift__isnull=False)
                ),
                name='student_shift_matches_admission_type',
            ),
        ),
    ]
