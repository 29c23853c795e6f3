# Generated manually for dashboard administrators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='AdminUser',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('username', models.CharField(help_text='Login name', max_length=100, unique=True)),
                ('password_hash', models.CharField(help_text='Salted password hash (Django hasher format)', max_length=255)),
                ('email', models.CharField(blank=True, help_text='Optional contact email', max_length=255, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True, help_text='When the account was created')),
            ],
            options={
                'verbose_name': 'Admin User',
                'verbose_name_plural': 'Admin Users',
                'db_table': 'admin_users',
                'ordering': ['created_at'],
            },
        ),
    ]
