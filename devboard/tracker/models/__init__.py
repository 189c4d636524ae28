# ============================================
# tracker/models/__init__.py
# ============================================
from .project import Project
from .workflow import WorkflowState
from .issue import Issue, IssueType, Label
from .history import IssueHistory
from .team import ProjectMember, ProjectInvitation
from .comment import Comment, Mention
from .notification import Notification
from .account import AccountLockout, EmailVerification

__all__ = [
    'Project',
    'WorkflowState',
    'Issue',
    'IssueType',
    'Label',
    'IssueHistory',
    'ProjectMember',
    'ProjectInvitation',
    'Comment',
    'Mention',
    'Notification',
    'AccountLockout',
    'EmailVerification',
]
