# ============================================
# tracker/models/issue.py
# ============================================
from django.conf import settings
from django.db import models
from django.utils import timezone


class IssueType(models.Model):
    name = models.CharField(max_length=50)
    icon = models.CharField(max_length=16, blank=True)
    color = models.CharField(max_length=16, blank=True)
    project = models.ForeignKey(
        'Project',
        on_delete=models.CASCADE,
        related_name='issue_types'
    )

    class Meta:
        db_table = 'issue_types'
        ordering = ['id']
        unique_together = ['name', 'project']

    def __str__(self):
        return f"{self.project.key} - {self.name}"


class Label(models.Model):
    name = models.CharField(max_length=50)
    color = models.CharField(max_length=16, default='#6B778C')
    project = models.ForeignKey(
        'Project',
        on_delete=models.CASCADE,
        related_name='labels'
    )

    class Meta:
        db_table = 'labels'
        ordering = ['name']
        unique_together = ['name', 'project']

    def __str__(self):
        return f"{self.project.key} - {self.name}"


class Issue(models.Model):
    class Priority(models.TextChoices):
        LOW = 'LOW', 'Low'
        MEDIUM = 'MEDIUM', 'Medium'
        HIGH = 'HIGH', 'High'
        CRITICAL = 'CRITICAL', 'Critical'

    project = models.ForeignKey(
        'Project',
        on_delete=models.CASCADE,
        related_name='issues'
    )
    number = models.PositiveIntegerField()
    key = models.CharField(max_length=50, unique=True, db_column='issue_key')
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    issue_type = models.ForeignKey(
        'IssueType',
        on_delete=models.PROTECT,
        related_name='issues'
    )
    workflow_state = models.ForeignKey(
        'WorkflowState',
        on_delete=models.PROTECT,
        related_name='issues'
    )
    priority = models.CharField(
        max_length=10,
        choices=Priority.choices,
        default=Priority.MEDIUM
    )
    board_position = models.IntegerField(null=True, blank=True)
    backlog_position = models.IntegerField(null=True, blank=True)
    reporter = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='reported_issues'
    )
    assignee = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='assigned_issues'
    )
    story_points = models.PositiveIntegerField(null=True, blank=True)
    due_date = models.DateField(null=True, blank=True)
    labels = models.ManyToManyField('Label', blank=True, related_name='issues')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'issues'
        ordering = ['-number']
        constraints = [
            models.UniqueConstraint(
                fields=['project', 'number'],
                name='uniq_issue_number_per_project'
            ),
        ]
        indexes = [
            models.Index(fields=['workflow_state', 'board_position']),
            models.Index(fields=['project', 'backlog_position']),
            models.Index(fields=['assignee']),
        ]

    def __str__(self):
        return f"{self.key} - {self.title}"

    @property
    def overdue(self) -> bool:
        if self.due_date is None:
            return False
        return timezone.localdate() > self.due_date and not self.workflow_state.terminal
