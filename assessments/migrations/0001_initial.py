from decimal import Decimal

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('exams', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Attempt',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('start_time', models.DateTimeField()),
                ('total_marks', models.DecimalField(decimal_places=2, max_digits=8)),
                ('score', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=8)),
                ('percentage', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=7)),
                ('time_taken', models.PositiveIntegerField(default=0)),
                ('elapsed_seconds', models.PositiveIntegerField(blank=True, null=True)),
                ('submitted_late', models.BooleanField(default=False)),
                ('auto_submitted', models.BooleanField(default=False)),
                ('submitted_at', models.DateTimeField(blank=True, null=True)),
                ('exam', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='attempts', to='exams.exam')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='attempts', to=settings.AUTH_USER_MODEL)),
            ],
        ),
        migrations.AddConstraint(
            model_name='attempt',
            constraint=models.UniqueConstraint(fields=('exam', 'user'), name='unique_attempt_per_participant'),
        ),
        migrations.CreateModel(
            name='AnswerSlot',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('position', models.PositiveIntegerField(default=0)),
                ('marks', models.DecimalField(decimal_places=2, default=Decimal('1'), max_digits=6)),
                ('negative_marks', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=6)),
                ('answer_kind', models.CharField(blank=True, choices=[('', 'Unanswered'), ('choice', 'Selected option'), ('text', 'Text answer')], default='', max_length=10)),
                ('selected_option', models.IntegerField(blank=True, null=True)),
                ('text_answer', models.TextField(blank=True, null=True)),
                ('is_correct', models.BooleanField(null=True)),
                ('marks_awarded', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=6)),
                ('attempt', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='answers', to='assessments.attempt')),
                ('question', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='exams.question')),
            ],
            options={
                'ordering': ['position', 'id'],
            },
        ),
        migrations.AddConstraint(
            model_name='answerslot',
            constraint=models.UniqueConstraint(fields=('attempt', 'question'), name='unique_slot_per_question'),
        ),
    ]
