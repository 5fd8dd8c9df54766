import django.core.validators
import django.db.models.deletion
import django.db.models.functions.text
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('catalog', '0001_initial'),
        ('orders', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Mill',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100)),
                ('contact_person', models.CharField(blank=True, default='', max_length=50)),
                ('contact_phone', models.CharField(blank=True, default='', max_length=20)),
                ('address', models.CharField(blank=True, default='', max_length=200)),
                ('email', models.EmailField(blank=True, default='', max_length=100)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'mills',
                'ordering': ['name'],
                'constraints': [
                    models.UniqueConstraint(django.db.models.functions.text.Lower('name'), name='mills_name_ci_unique'),
                ],
            },
        ),
        migrations.CreateModel(
            name='MillInput',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('mill_date', models.DateField()),
                ('chalan_no', models.CharField(max_length=50)),
                ('greigh_mtr', models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(0)])),
                ('pcs', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ('additional_meters', models.JSONField(blank=True, default=list)),
                ('notes', models.CharField(blank=True, default='', max_length=500)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('mill', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='inputs', to='mills.mill')),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='mill_inputs', to='orders.order')),
                ('quality', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='mill_inputs', to='catalog.quality')),
            ],
            options={
                'db_table': 'mill_inputs',
                'ordering': ['-mill_date', '-created_at'],
                'indexes': [
                    models.Index(fields=['order', '-mill_date'], name='mill_inputs_order_date_idx'),
                    models.Index(fields=['mill', '-mill_date'], name='mill_inputs_mill_date_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='MillOutput',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('recd_date', models.DateField()),
                ('mill_bill_no', models.CharField(max_length=50)),
                ('finished_mtr', models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(0)])),
                ('mill_rate', models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(0)])),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='mill_outputs', to='orders.order')),
                ('quality', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='mill_outputs', to='catalog.quality')),
            ],
            options={
                'db_table': 'mill_outputs',
                'ordering': ['-recd_date', '-created_at'],
                'indexes': [
                    models.Index(fields=['order', '-recd_date'], name='mill_outputs_order_date_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Dispatch',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('dispatch_date', models.DateField()),
                ('bill_no', models.CharField(max_length=50)),
                ('finish_mtr', models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(0)])),
                ('sale_rate', models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(0)])),
                ('total_value', models.DecimalField(decimal_places=2, default=0, max_digits=16)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='dispatches', to='orders.order')),
            ],
            options={
                'db_table': 'dispatches',
                'ordering': ['-dispatch_date', '-created_at'],
                'verbose_name_plural': 'dispatches',
                'indexes': [
                    models.Index(fields=['order', '-dispatch_date'], name='dispatches_order_date_idx'),
                ],
            },
        ),
    ]
