"""Principal kinds and the per-kind directory/entitlement attributes."""

import dataclasses
import enum
from typing import Optional


@dataclasses.dataclass(frozen=True, slots=True)
class KindInfo:
    """Backend names associated with one principal kind."""
    collection: Optional[str]      # SCIM collection, None when never resolved
    filter_attribute: Optional[str]
    path_segment: str              # entitlements/definitions/<segment>/<id>
    subject_type: Optional[str]    # subjectType of a created entitlement


class PrincipalKind(enum.Enum):
    """Closed set of principals that can be looked up or entitled."""

    USER = "user"
    GROUP = "group"
    APP = "app"

    @classmethod
    def parse(cls, token: str) -> "PrincipalKind":
        """Map a command-line token (``user``, ``group``, ``app``) to a kind.

        Raises:
            ValueError: If *token* names no known kind.
        """
        try:
            return cls(token)
        except ValueError:
            raise ValueError(f"unknown principal kind: {token!r}") from None

    @property
    def info(self) -> KindInfo:
        return _KIND_TABLE[self]

    @property
    def resolvable(self) -> bool:
        """Whether names of this kind go through a SCIM lookup."""
        return self.info.collection is not None

    def __str__(self) -> str:
        return self.value


_KIND_TABLE: dict[PrincipalKind, KindInfo] = {
    PrincipalKind.USER: KindInfo("Users", "userName", "users", "USERS"),
    PrincipalKind.GROUP: KindInfo("Groups", "displayName", "groups", "GROUPS"),
    PrincipalKind.APP: KindInfo(None, None, "catalogitems", None),
}
