# Generated manually for contact submissions and notification logs
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='ContactSubmission',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text='Name of the person contacting us', max_length=255)),
                ('email', models.CharField(help_text='Email address for follow-up', max_length=255)),
                ('phone', models.CharField(blank=True, help_text='Optional phone number', max_length=50, null=True)),
                ('company', models.CharField(blank=True, help_text='Optional company name', max_length=255, null=True)),
                ('message', models.TextField(help_text='The actual message content')),
                ('status', models.CharField(default='new', help_text='Current status of the submission', max_length=50)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, help_text='When the submission was received')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='When the submission was last updated')),
            ],
            options={
                'verbose_name': 'Contact Submission',
                'verbose_name_plural': 'Contact Submissions',
                'db_table': 'contact_submissions',
                'ordering': ['-created_at', '-id'],
            },
        ),
        migrations.CreateModel(
            name='NotificationLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('channel', models.CharField(choices=[('email', 'Email'), ('whatsapp', 'WhatsApp')], db_column='type', help_text='Notification channel', max_length=50)),
                ('status', models.CharField(choices=[('sent', 'Sent'), ('failed', 'Failed')], help_text='Delivery outcome', max_length=50)),
                ('details', models.TextField(blank=True, default='', help_text='Provider reference or raw error detail')),
                ('created_at', models.DateTimeField(auto_now_add=True, help_text='When the attempt finished')),
                ('submission', models.ForeignKey(help_text='The submission this notification was about', on_delete=django.db.models.deletion.PROTECT, related_name='notification_logs', to='contact.contactsubmission')),
            ],
            options={
                'verbose_name': 'Notification Log',
                'verbose_name_plural': 'Notification Logs',
                'db_table': 'notification_logs',
                'ordering': ['-created_at', '-id'],
            },
        ),
        migrations.AddIndex(
            model_name='notificationlog',
            index=models.Index(fields=['submission', 'created_at'], name='notif_log_submission_idx'),
        ),
    ]
