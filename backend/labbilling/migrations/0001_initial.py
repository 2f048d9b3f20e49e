import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Prescription',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('patient_id', models.CharField(db_index=True, max_length=50)),
                ('patient_name', models.CharField(blank=True, default='', max_length=200)),
                ('date', models.DateField(db_index=True)),
                ('advice', models.JSONField(blank=True, default=list)),
                ('record', models.JSONField(blank=True, default=dict)),
                ('source', models.CharField(blank=True, default='', max_length=30)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'db_table': 'prescriptions',
                'ordering': ['-date', '-created_at'],
            },
        ),
        migrations.CreateModel(
            name='LabRecord',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('patient_id', models.CharField(blank=True, db_index=True, default='', max_length=50)),
                ('patient_name', models.CharField(blank=True, default='', max_length=200)),
                ('date', models.DateField(db_index=True)),
                ('sno', models.PositiveIntegerField(default=1)),
                ('created_by', models.CharField(blank=True, default='', max_length=200)),
                ('record', models.JSONField(default=dict)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'lab_records',
                'ordering': ['-date', '-created_at'],
            },
        ),
    ]
