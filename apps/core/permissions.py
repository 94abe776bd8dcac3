# apps/core/permissions.py

from rest_framework.permissions import BasePermission

from academy.domain.assessments.entities import Role, is_privileged_role


def user_role(u) -> str:
    """
    인증 사용자는 User.effective_role (superuser → admin 승격 포함).
    미인증은 student.
    """
    if u is None or not getattr(u, "is_authenticated", False):
        return Role.STUDENT.value
    return str(u.effective_role).lower()


def is_instructor_or_admin(u) -> bool:
    return is_privileged_role(user_role(u))


class IsInstructorOrAdmin(BasePermission):
    """
    강사 / 관리자 전용 Permission
    """
    message = "Instructor or admin role required."

    def has_permission(self, request, view):
        u = getattr(request, "user", None)
        return bool(u and u.is_authenticated and is_instructor_or_admin(u))


class IsAdminRole(BasePermission):
    """
    관리자 전용 Permission (assessment 삭제 등)
    """
    message = "Admin role required."

    def has_permission(self, request, view):
        u = getattr(request, "user", None)
        return bool(u and u.is_authenticated and user_role(u) == Role.ADMIN.value)
