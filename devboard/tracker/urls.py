# ============================================
# tracker/urls.py
# ============================================
from django.urls import path

from tracker.views.auth import (
    LoginAPIView,
    LogoutAPIView,
    MeAPIView,
    PasswordResetConfirmAPIView,
    PasswordResetRequestAPIView,
    RegisterAPIView,
    VerifyEmailAPIView,
)
from tracker.views.comment import CommentDetailAPIView, CommentListCreateAPIView
from tracker.views.issue import (
    IssueByKeyAPIView,
    IssueDetailAPIView,
    IssueHistoryAPIView,
    IssueMoveAPIView,
    MyIssuesAPIView,
)
from tracker.views.notification import (
    NotificationListAPIView,
    NotificationReadAllAPIView,
    NotificationReadAPIView,
    UnreadCountAPIView,
    UnreadNotificationListAPIView,
)
from tracker.views.project import (
    BacklogAPIView,
    BoardAPIView,
    IssueTypeListAPIView,
    LabelListCreateAPIView,
    ProjectArchiveAPIView,
    ProjectDetailAPIView,
    ProjectIssueListCreateAPIView,
    ProjectListCreateAPIView,
    ProjectRestoreAPIView,
    WorkflowStateListAPIView,
)
from tracker.views.team import (
    AcceptInvitationAPIView,
    InvitationDetailAPIView,
    InviteMemberAPIView,
    MemberDetailAPIView,
    MemberRoleAPIView,
    PendingInvitationsAPIView,
    ProjectMembersAPIView,
)
from tracker.views.workflow import WorkflowTransitionsAPIView

app_name = 'tracker'

urlpatterns = [
    # Auth
    path('auth/login/', LoginAPIView.as_view(), name='auth-login'),
    path('auth/logout/', LogoutAPIView.as_view(), name='auth-logout'),
    path('auth/me/', MeAPIView.as_view(), name='auth-me'),
    path('auth/register/', RegisterAPIView.as_view(), name='auth-register'),
    path('auth/verify/', VerifyEmailAPIView.as_view(), name='auth-verify'),
    path('auth/password-reset/request/', PasswordResetRequestAPIView.as_view(), name='auth-password-reset-request'),
    path('auth/password-reset/confirm/', PasswordResetConfirmAPIView.as_view(), name='auth-password-reset-confirm'),

    # Projects
    path('projects/', ProjectListCreateAPIView.as_view(), name='project-list-create'),
    path('projects/<int:project_id>/', ProjectDetailAPIView.as_view(), name='project-detail'),
    path('projects/<int:project_id>/archive/', ProjectArchiveAPIView.as_view(), name='project-archive'),
    path('projects/<int:project_id>/restore/', ProjectRestoreAPIView.as_view(), name='project-restore'),
    path('projects/<int:project_id>/labels/', LabelListCreateAPIView.as_view(), name='project-labels'),
    path('projects/<int:project_id>/workflow-states/', WorkflowStateListAPIView.as_view(), name='project-workflow-states'),
    path('projects/<int:project_id>/issue-types/', IssueTypeListAPIView.as_view(), name='project-issue-types'),
    path('projects/<int:project_id>/issues/', ProjectIssueListCreateAPIView.as_view(), name='project-issues'),
    path('projects/<int:project_id>/backlog/', BacklogAPIView.as_view(), name='project-backlog'),
    path('projects/<int:project_id>/board/', BoardAPIView.as_view(), name='project-board'),

    # Issues
    path('issues/mine/', MyIssuesAPIView.as_view(), name='issue-mine'),
    path('issues/key/<str:key>/', IssueByKeyAPIView.as_view(), name='issue-by-key'),
    path('issues/<int:issue_id>/', IssueDetailAPIView.as_view(), name='issue-detail'),
    path('issues/<int:issue_id>/history/', IssueHistoryAPIView.as_view(), name='issue-history'),
    path('issues/<int:issue_id>/move/', IssueMoveAPIView.as_view(), name='issue-move'),

    # Workflow
    path('workflow-states/<int:state_id>/transitions/', WorkflowTransitionsAPIView.as_view(), name='workflow-transitions'),

    # Team
    path('projects/<int:project_id>/members/', ProjectMembersAPIView.as_view(), name='project-members'),
    path('projects/<int:project_id>/members/invite/', InviteMemberAPIView.as_view(), name='project-invite'),
    path('projects/<int:project_id>/members/<int:member_id>/', MemberDetailAPIView.as_view(), name='project-member-detail'),
    path('projects/<int:project_id>/members/<int:member_id>/role/', MemberRoleAPIView.as_view(), name='project-member-role'),
    path('projects/<int:project_id>/invitations/', PendingInvitationsAPIView.as_view(), name='project-invitations'),
    path('invitations/accept/', AcceptInvitationAPIView.as_view(), name='invitation-accept'),
    path('invitations/<int:invitation_id>/', InvitationDetailAPIView.as_view(), name='invitation-detail'),

    # Comments
    path('issues/<int:issue_id>/comments/', CommentListCreateAPIView.as_view(), name='comment-list-create'),
    path('comments/<int:comment_id>/', CommentDetailAPIView.as_view(), name='comment-detail'),

    # Notifications
    path('notifications/', NotificationListAPIView.as_view(), name='notification-list'),
    path('notifications/unread/', UnreadNotificationListAPIView.as_view(), name='notification-unread'),
    path('notifications/unread/count/', UnreadCountAPIView.as_view(), name='notification-unread-count'),
    path('notifications/read-all/', NotificationReadAllAPIView.as_view(), name='notification-read-all'),
    path('notifications/<int:notification_id>/read/', NotificationReadAPIView.as_view(), name='notification-read'),
]
