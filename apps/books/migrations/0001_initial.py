# Generated manually for the books app

import uuid
from decimal import Decimal
from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Book',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('title', models.CharField(max_length=200)),
                ('author', models.CharField(max_length=200)),
                ('description', models.TextField()),
                ('genre', models.CharField(choices=[('Fiction', 'Fiction'), ('Non-fiction', 'Non-fiction'), ('Fantasy', 'Fantasy'), ('Science Fiction', 'Science Fiction'), ('Mystery', 'Mystery'), ('Thriller', 'Thriller'), ('Romance', 'Romance'), ('Biography', 'Biography'), ('History', 'History'), ('Self-help', 'Self-help'), ('Other', 'Other')], max_length=50)),
                ('publication_year', models.IntegerField(blank=True, null=True)),
                ('average_rating', models.DecimalField(decimal_places=1, default=Decimal('0.0'), editable=False, max_digits=2, validators=[MinValueValidator(Decimal('0.0')), MaxValueValidator(Decimal('5.0'))])),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='books', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'books',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['title'], name='books_title_idx'),
                    models.Index(fields=['author'], name='books_author_idx'),
                    models.Index(fields=['genre'], name='books_genre_idx'),
                    models.Index(fields=['publication_year'], name='books_pub_year_idx'),
                    models.Index(fields=['average_rating'], name='books_avg_rating_idx'),
                    models.Index(fields=['created_at'], name='books_created_at_idx'),
                ],
            },
        ),
    ]
