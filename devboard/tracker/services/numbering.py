# ============================================
# tracker/services/numbering.py
# ============================================
"""
Issue key allocation: ``<PROJECT_KEY>-<number>`` with number = max + 1.

The project row is locked (SELECT ... FOR UPDATE) while the max is read and
the issue inserted, so writers on the same project are serialised and
writers on different projects are not. Backends without row locks (SQLite)
are configured to take the database write lock at BEGIN (IMMEDIATE mode),
which queues writers the same way. The (project, number) and issue_key
unique constraints stay the last guard: a losing writer gets an
IntegrityError, a writer that waited too long an OperationalError, and
either way the attempt is rolled back and retried a bounded number of
times.
"""
import logging
from typing import Callable

from django.db import IntegrityError, OperationalError, transaction

from tracker.conf import tracker_setting
from tracker.exceptions import Conflict, NotFound
from tracker.models import Issue, Project
from tracker.repositories import issue_repository as repo
from tracker.utils.retry import backoff

logger = logging.getLogger(__name__)

IssueBuilder = Callable[[Project, int, str], Issue]


def format_issue_key(project_key: str, number: int) -> str:
    return f"{project_key}-{number}"


def lock_project(project_id: int) -> Project:
    try:
        return Project.objects.select_for_update().get(id=project_id)
    except Project.DoesNotExist:
        raise NotFound(f"Project not found: {project_id}")


def next_issue_number(project: Project) -> int:
    """Caller must hold the project lock"""
    return repo.max_number(project.id) + 1


def allocate_and_create(project_id: int, build: IssueBuilder) -> Issue:
    """
    Allocate (number, key) for a new issue of the project and call
    ``build(project, number, key)`` inside the same transaction. ``build``
    must insert the issue; anything it writes is rolled back together with
    the allocation when the insert loses a race.

    A taken number (IntegrityError) or a lock conflict (OperationalError,
    e.g. SQLite "database is locked" or a deadlock) rolls the attempt back
    and starts over; after ISSUE_KEY_MAX_RETRIES attempts the caller gets
    a 409 Conflict.
    """
    attempts = tracker_setting('ISSUE_KEY_MAX_RETRIES')
    last_error = None

    for attempt in range(1, attempts + 1):
        number = None
        try:
            with transaction.atomic():
                project = lock_project(project_id)
                number = next_issue_number(project)
                issue = build(project, number, format_issue_key(project.key, number))
            return issue
        except IntegrityError as ex:
            if number is None or not Issue.objects.filter(project_id=project_id, number=number).exists():
                raise
            last_error = ex
            logger.warning(
                "[numbering] number %s already taken in project=%s (attempt %s/%s): %s",
                number, project_id, attempt, attempts, ex
            )
        except OperationalError as ex:
            last_error = ex
            logger.warning(
                "[numbering] lock conflict in project=%s (attempt %s/%s): %s",
                project_id, attempt, attempts, ex
            )
        if attempt < attempts:
            backoff(attempt)

    raise Conflict(
        f"Could not allocate an issue number for project {project_id}, please retry"
    ) from last_error
