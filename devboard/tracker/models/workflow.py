# ============================================
# tracker/models/workflow.py
# ============================================
from typing import FrozenSet, Iterable

from django.db import models


def parse_transition_ids(raw: str) -> FrozenSet[int]:
    return frozenset(int(part) for part in (raw or '').split(',') if part.strip())


def format_transition_ids(ids: Iterable[int]) -> str:
    return ','.join(str(i) for i in sorted(set(ids)))


class WorkflowState(models.Model):
    name = models.CharField(max_length=50)
    project = models.ForeignKey(
        'Project',
        on_delete=models.CASCADE,
        related_name='workflow_states'
    )
    order = models.IntegerField(default=0, db_column='display_order')
    terminal = models.BooleanField(default=False)
    # Comma-separated target state ids; empty means "any state of the project".
    allowed_transitions = models.CharField(max_length=500, blank=True, default='')

    class Meta:
        db_table = 'workflow_states'
        ordering = ['order', 'id']
        unique_together = ['name', 'project']
        indexes = [
            models.Index(fields=['project', 'order']),
        ]

    def __str__(self):
        return f"{self.project.key} - {self.name}"

    @property
    def allowed_transition_ids(self) -> FrozenSet[int]:
        return parse_transition_ids(self.allowed_transitions)

    @allowed_transition_ids.setter
    def allowed_transition_ids(self, ids: Iterable[int]) -> None:
        self.allowed_transitions = format_transition_ids(ids)

    def can_transition_to(self, target_id: int) -> bool:
        ids = self.allowed_transition_ids
        return not ids or target_id in ids
