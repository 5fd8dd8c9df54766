import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('orders', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Lab',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('lab_send_date', models.DateField()),
                ('approval_date', models.DateField(blank=True, null=True)),
                ('sample_number', models.CharField(blank=True, default='', max_length=100)),
                ('lab_send_number', models.CharField(blank=True, default='', max_length=100)),
                ('status', models.CharField(choices=[('sent', 'Sent'), ('received', 'Received'), ('cancelled', 'Cancelled')], default='sent', max_length=20)),
                ('received_date', models.DateField(blank=True, null=True)),
                ('attachments', models.JSONField(blank=True, default=list)),
                ('remarks', models.CharField(blank=True, default='', max_length=500)),
                ('soft_deleted', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='labs', to='orders.order')),
                ('order_item', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='labs', to='orders.orderitem')),
            ],
            options={
                'db_table': 'labs',
                'ordering': ['created_at', 'id'],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('soft_deleted', False)), fields=('order_item',), name='labs_one_live_lab_per_item'),
                ],
                'indexes': [
                    models.Index(fields=['order', 'soft_deleted'], name='labs_order_deleted_idx'),
                    models.Index(fields=['status', 'soft_deleted'], name='labs_status_deleted_idx'),
                    models.Index(fields=['-lab_send_date'], name='labs_send_date_idx'),
                ],
            },
        ),
    ]
