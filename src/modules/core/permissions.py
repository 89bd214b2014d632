"""Role-based DRF permissions."""

from __future__ import annotations

from rest_framework.permissions import BasePermission

from modules.core.tokens import ADMIN_ROLE, role_for


def request_role(request) -> str | None:
    """Role of the caller: the token claim when present, else the user flags."""
    user = request.user
    if not user or not user.is_authenticated:
        return None
    token = request.auth
    if token is not None and hasattr(token, "get"):
        claimed = token.get("role")
        if claimed:
            return claimed
    return role_for(user)


class IsAdminRole(BasePermission):
    message = "Admin role required."

    def has_permission(self, request, view) -> bool:
        return request_role(request) == ADMIN_ROLE
