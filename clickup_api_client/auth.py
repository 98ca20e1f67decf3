"""Authorization header selection for ClickUp requests."""

from dataclasses import dataclass

from .errors import configuration_error


@dataclass(frozen=True)
class Authenticator:
    """Picks the credential to send with every request.

    OAuth access tokens win over personal tokens. Personal tokens (``pk_...``)
    go out verbatim with no scheme prefix; that's how ClickUp expects them.
    Raises a CONFIGURATION error at construction when neither is set, so a
    misconfigured client never reaches the network.
    """

    personal_access_token: str | None = None
    oauth_access_token: str | None = None

    def __post_init__(self):
        if not self.oauth_access_token and not self.personal_access_token:
            raise configuration_error(
                "No ClickUp credential configured: set CLICKUP_OAUTH_ACCESS_TOKEN "
                "or CLICKUP_PERSONAL_ACCESS_TOKEN"
            )

    @classmethod
    def from_settings(cls, settings) -> "Authenticator":
        return cls(
            personal_access_token=settings.personal_access_token,
            oauth_access_token=settings.oauth_access_token,
        )

    @property
    def authorization(self) -> str:
        """Value for the Authorization header."""
        if self.oauth_access_token:
            return f"Bearer {self.oauth_access_token}"
        return self.personal_access_token

    def __repr__(self) -> str:
        scheme = "oauth" if self.oauth_access_token else "personal"
        return f"Authenticator(scheme={scheme!r})"
