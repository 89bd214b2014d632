"""JWT issuance with a role claim.

The access token carries ``role`` (``Admin`` for staff users, ``User``
otherwise) so authorization decisions need no extra database round-trip.
"""

from __future__ import annotations

from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

ADMIN_ROLE = "Admin"
USER_ROLE = "User"


def role_for(user) -> str:
    return ADMIN_ROLE if user.is_staff or user.is_superuser else USER_ROLE


class RoleTokenObtainPairSerializer(TokenObtainPairSerializer):
    """SimpleJWT pair serializer that stamps the caller's role."""

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token["role"] = role_for(user)
        return token

    def validate(self, attrs):
        data = super().validate(attrs)
        data["token_type"] = "Bearer"
        data["role"] = role_for(self.user)
        return data
