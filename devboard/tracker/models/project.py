# ============================================
# tracker/models/project.py
# ============================================
from django.conf import settings
from django.core.validators import RegexValidator
from django.db import models

project_key_validator = RegexValidator(
    regex=r'^[A-Z]{2,10}$',
    message='Project key must be 2-10 uppercase letters',
)


class Project(models.Model):
    name = models.CharField(max_length=100)
    key = models.CharField(
        max_length=10,
        unique=True,
        db_index=True,
        validators=[project_key_validator]
    )
    description = models.TextField(blank=True)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='owned_projects'
    )
    archived = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'projects'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.key} - {self.name}"

    def is_owner(self, user) -> bool:
        return user is not None and self.owner_id == user.id
