from django.contrib import admin

from .models import (
    AccountLockout, Comment, EmailVerification, Issue, IssueHistory, IssueType, Label, Notification,
    Project, ProjectInvitation, ProjectMember, WorkflowState,
)

admin.site.register(IssueType)
admin.site.register(Label)


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ("id", "key", "name", "owner", "archived", "created_at")
    search_fields = ("key", "name")
    list_filter = ("archived",)


@admin.register(WorkflowState)
class WorkflowStateAdmin(admin.ModelAdmin):
    list_display = ("id", "project", "name", "order", "terminal", "allowed_transitions")
    list_filter = ("project",)
    ordering = ("project", "order")


@admin.register(Issue)
class IssueAdmin(admin.ModelAdmin):
    list_display = ("key", "title", "workflow_state", "priority", "assignee", "board_position", "backlog_position")
    search_fields = ("key", "title")
    list_filter = ("project", "priority")
    readonly_fields = ("number", "key")  # allocated once, never edited


@admin.register(IssueHistory)
class IssueHistoryAdmin(admin.ModelAdmin):
    list_display = ("issue", "field_name", "old_value", "new_value", "changed_by", "changed_at")
    search_fields = ("issue__key",)

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(ProjectMember)
class ProjectMemberAdmin(admin.ModelAdmin):
    list_display = ("project", "user", "role", "joined_at")
    list_filter = ("role",)


@admin.register(ProjectInvitation)
class ProjectInvitationAdmin(admin.ModelAdmin):
    list_display = ("project", "email", "role", "status", "created_at", "expires_at")
    list_filter = ("status",)
    search_fields = ("email",)


@admin.register(Comment)
class CommentAdmin(admin.ModelAdmin):
    list_display = ("id", "issue", "author", "is_edited", "created_at")


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "type", "is_read", "created_at")
    list_filter = ("type", "is_read")


@admin.register(AccountLockout)
class AccountLockoutAdmin(admin.ModelAdmin):
    list_display = ("user", "failed_attempts", "locked", "lockout_time", "last_login_at")


@admin.register(EmailVerification)
class EmailVerificationAdmin(admin.ModelAdmin):
    list_display = ("user", "email", "created_at", "verified_at")
    search_fields = ("user__username", "email")
