"""Role permissions and principal resolution.

Identity is trusted as already verified by DRF authentication; these classes
only read the caller's membership.
"""

from rest_framework import permissions

from ticketing.domain import OrganizationId, Principal, Role
from ticketing.models import Member


def member_for(user) -> Member | None:
    if not user or not user.is_authenticated:
        return None
    return Member.objects.filter(user_id=user.pk).first()


def principal_for(user) -> Principal | None:
    member = member_for(user)
    if member is None:
        return None
    return Principal(
        user_id=user.pk,
        role=Role(member.role),
        organization_id=(
            OrganizationId(member.organization_id) if member.organization_id else None
        ),
    )


class HasApprovedRole(permissions.BasePermission):
    """Allows approved members holding ``role``."""

    role: Role

    def has_permission(self, request, view):
        member = member_for(request.user)
        return member is not None and member.is_approved and member.role == self.role.value


class IsStudent(HasApprovedRole):
    role = Role.STUDENT


class IsOrganizer(HasApprovedRole):
    role = Role.ORGANIZER


class IsAdmin(HasApprovedRole):
    role = Role.ADMIN
