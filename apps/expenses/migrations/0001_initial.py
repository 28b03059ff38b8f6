# Generated manually for the expenses app

import uuid
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('groups', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Expense',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('description', models.CharField(max_length=255)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12)),
                ('date', models.DateField()),
                ('paid_by', models.CharField(max_length=100)),
                ('split_type', models.CharField(choices=[('equal', 'Equal'), ('percentage', 'Percentage'), ('fixed', 'Fixed Amount')], default='equal', max_length=20)),
                ('category', models.CharField(blank=True, db_index=True, default='', max_length=50)),
                ('receipt_note', models.TextField(blank=True, default='')),
                ('group', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='expenses', to='groups.group')),
            ],
            options={
                'db_table': 'expenses',
                'ordering': ['-date', '-created_at'],
            },
        ),
        migrations.CreateModel(
            name='ExpenseSplit',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('member', models.CharField(max_length=100)),
                ('amount', models.DecimalField(decimal_places=2, help_text='Amount owed by this member.', max_digits=12)),
                ('percentage', models.DecimalField(blank=True, decimal_places=4, help_text='Share of the total in percent; informational only.', max_digits=9, null=True)),
                ('position', models.PositiveIntegerField(default=0)),
                ('expense', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='splits', to='expenses.expense')),
            ],
            options={
                'db_table': 'expense_splits',
                'ordering': ['position'],
                'unique_together': {('expense', 'member')},
            },
        ),
        migrations.CreateModel(
            name='Settlement',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('from_member', models.CharField(help_text='The member who paid.', max_length=100)),
                ('to_member', models.CharField(help_text='The member who received the payment.', max_length=100)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12)),
                ('method', models.CharField(blank=True, default='cash', max_length=50)),
                ('date', models.DateField()),
                ('note', models.TextField(blank=True, default='')),
                ('group', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='settlements', to='groups.group')),
            ],
            options={
                'db_table': 'settlements',
                'ordering': ['-date', '-created_at'],
            },
        ),
    ]
