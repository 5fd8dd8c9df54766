import django.contrib.auth.models
import django.contrib.auth.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
    ]

    operations = [
        migrations.CreateModel(
            name='User',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('username', models.CharField(error_messages={'unique': 'A user with that username already exists.'}, help_text='Required. 150 characters or fewer. Letters, digits and @/./+/-/_ only.', max_length=150, unique=True, validators=[django.contrib.auth.validators.UnicodeUsernameValidator()], verbose_name='username')),
                ('first_name', models.CharField(blank=True, max_length=150, verbose_name='first name')),
                ('last_name', models.CharField(blank=True, max_length=150, verbose_name='last name')),
                ('email', models.EmailField(blank=True, max_length=254, verbose_name='email address')),
                ('is_staff', models.BooleanField(default=False, help_text='Designates whether the user can log into this admin site.', verbose_name='staff status')),
                ('is_active', models.BooleanField(default=True, help_text='Designates whether this user should be treated as active. Unselect this instead of deleting accounts.', verbose_name='active')),
                ('date_joined', models.DateTimeField(default=django.utils.timezone.now, verbose_name='date joined')),
                ('name', models.CharField(blank=True, default='', max_length=100)),
                ('role', models.CharField(choices=[('superadmin', 'Super Admin'), ('user', 'User')], default='user', max_length=20)),
                ('phone_number', models.CharField(blank=True, max_length=20, null=True)),
                ('address', models.TextField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
            ],
            options={
                'db_table': 'users',
                'ordering': ['-created_at'],
            },
            managers=[
                ('objects', django.contrib.auth.models.UserManager()),
            ],
        ),
        migrations.CreateModel(
            name='AuditLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('username', models.CharField(blank=True, default='', help_text='Username at the time of the action', max_length=150)),
                ('action', models.CharField(choices=[('login', 'Login'), ('logout', 'Logout'), ('login_failed', 'Login Failed'), ('user_create', 'User Created'), ('user_update', 'User Updated'), ('user_delete', 'User Deleted'), ('party_create', 'Party Created'), ('party_update', 'Party Updated'), ('party_delete', 'Party Deleted'), ('quality_create', 'Quality Created'), ('quality_update', 'Quality Updated'), ('quality_delete', 'Quality Deleted'), ('fabric_create', 'Fabric Created'), ('fabric_update', 'Fabric Updated'), ('fabric_delete', 'Fabric Deleted'), ('order_create', 'Order Created'), ('order_update', 'Order Updated'), ('order_delete', 'Order Deleted'), ('order_status_change', 'Order Status Changed'), ('lab_create', 'Lab Created'), ('lab_update', 'Lab Updated'), ('lab_delete', 'Lab Deleted'), ('mill_create', 'Mill Created'), ('mill_update', 'Mill Updated'), ('mill_delete', 'Mill Deleted'), ('mill_input_create', 'Mill Input Created'), ('mill_input_update', 'Mill Input Updated'), ('mill_input_delete', 'Mill Input Deleted'), ('mill_output_create', 'Mill Output Created'), ('mill_output_update', 'Mill Output Updated'), ('mill_output_delete', 'Mill Output Deleted'), ('dispatch_create', 'Dispatch Created'), ('dispatch_update', 'Dispatch Updated'), ('dispatch_delete', 'Dispatch Deleted')], max_length=50)),
                ('resource', models.CharField(choices=[('auth', 'Authentication'), ('user', 'User'), ('party', 'Party'), ('quality', 'Quality'), ('fabric', 'Fabric'), ('order', 'Order'), ('lab', 'Lab'), ('mill', 'Mill'), ('mill_input', 'Mill Input'), ('mill_output', 'Mill Output'), ('dispatch', 'Dispatch'), ('dashboard', 'Dashboard'), ('system', 'System')], max_length=30)),
                ('resource_id', models.CharField(blank=True, default='', max_length=100)),
                ('object_name', models.CharField(blank=True, help_text='Human-readable name of the object (e.g., quality name, order id)', max_length=255, null=True)),
                ('changes', models.JSONField(blank=True, default=dict)),
                ('ip_address', models.GenericIPAddressField(blank=True, null=True)),
                ('user_agent', models.CharField(blank=True, default='', max_length=255)),
                ('success', models.BooleanField(default=True)),
                ('severity', models.CharField(choices=[('info', 'Info'), ('warning', 'Warning'), ('error', 'Error'), ('critical', 'Critical')], default='info', max_length=10)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='audit_logs', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'audit_logs',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['user', '-created_at'], name='audit_logs_user_id_2b6f1e_idx'),
                    models.Index(fields=['resource', 'resource_id'], name='audit_logs_resourc_7c0d4a_idx'),
                    models.Index(fields=['action', '-created_at'], name='audit_logs_action_9e3b52_idx'),
                ],
            },
        ),
    ]
