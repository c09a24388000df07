"""Pydantic schemas for moviegoer identity."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Identity(BaseModel):
    """A verified identity handed over by the authentication provider."""

    model_config = ConfigDict(extra="ignore")

    provider: str | None = Field(default=None, description="Identity provider, e.g. 'github'")
    uid: str | None = Field(default=None, description="User id within the provider")
    name: str | None = Field(default=None, description="Display name")
    email: str | None = Field(default=None, description="Email address")

    @field_validator("uid", mode="before")
    @classmethod
    def coerce_uid(cls, v: Any) -> Any:
        """Providers such as GitHub send numeric uids; store them as text."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @classmethod
    def from_auth_hash(cls, auth_hash: dict[str, Any]) -> "Identity":
        """Build an identity from an OmniAuth-style auth hash.

        The hash carries ``provider`` and ``uid`` at the top level and the
        profile under ``info``.
        """
        info = auth_hash.get("info") or {}
        return cls(
            provider=auth_hash.get("provider"),
            uid=auth_hash.get("uid"),
            name=info.get("name"),
            email=info.get("email"),
        )
