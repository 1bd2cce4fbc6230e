from __future__ import annotations

import os
from dataclasses import dataclass, field

from supabase import Client, create_client

ADMIN_ROLE = "admin"


@dataclass(slots=True)
class UserInfo:
    id: str
    email: str | None
    roles: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_admin(self) -> bool:
        return ADMIN_ROLE in self.roles


class SupabaseAuthAdapter:
    """Validates Supabase access tokens and resolves the caller's roles.

    When SUPABASE_DISABLED=1 every token is accepted as a fake user; tokens
    starting with ``admin-`` get the admin role.
    """

    def __init__(self) -> None:
        self.disabled = os.getenv("SUPABASE_DISABLED", "0") == "1"
        self.url = os.getenv("SUPABASE_URL")
        self.key = os.getenv("SUPABASE_ANON_KEY")
        self._client: Client | None = None
        if not self.disabled and self.url and self.key:
            self._client = create_client(self.url, self.key)

    def validate_token(self, token: str) -> UserInfo:
        if not token:
            raise ValueError("Missing access token")
        if self.disabled or not self._client:
            fake_id = f"fake-{abs(hash(token)) % (10**10)}"
            roles = frozenset({ADMIN_ROLE}) if token.startswith("admin-") else frozenset()
            return UserInfo(id=fake_id, email=None, roles=roles)
        try:  # pragma: no cover - network path
            res = self._client.auth.get_user(token)
            user = res.user
        except Exception as exc:  # pragma: no cover
            raise ValueError(f"Invalid access token: {exc}") from exc
        if not user:  # pragma: no cover
            raise ValueError("Invalid access token")
        metadata = getattr(user, "app_metadata", None) or {}
        return UserInfo(id=user.id, email=user.email, roles=frozenset(metadata.get("roles", [])))
