"""Bitbucket Server response models."""

from typing import Any

from pydantic import BaseModel, Field


class BitbucketServerUser(BaseModel):
    """Bitbucket Server user model."""

    id: int | None = None
    name: str | None = None
    slug: str | None = None
    display_name: str | None = None
    email_address: str | None = None
    active: bool | None = None

    @classmethod
    def from_raw(cls, data: dict[str, Any]) -> "BitbucketServerUser":
        """Create user model from raw API data.

        Args:
            data: Raw API response

        Returns:
            BitbucketServerUser instance
        """
        return cls(
            id=data.get("id"),
            name=data.get("name"),
            slug=data.get("slug"),
            display_name=data.get("displayName"),
            email_address=data.get("emailAddress"),
            active=data.get("active"),
        )


class BitbucketServerPersonalAccessToken(BaseModel):
    """Bitbucket Server personal access token model."""

    id: str | None = None
    name: str | None = None
    created_date: int | None = None
    last_authenticated: int | None = None
    permissions: list[str] = Field(default_factory=list)
    user: BitbucketServerUser | None = None
    token: str | None = None

    @classmethod
    def from_raw(cls, data: dict[str, Any]) -> "BitbucketServerPersonalAccessToken":
        """Create personal access token model from raw API data.

        The raw token value is only present in the response to a creation request.
        """
        user_data = data.get("user")
        return cls(
            id=str(data["id"]) if data.get("id") is not None else None,
            name=data.get("name"),
            created_date=data.get("createdDate"),
            last_authenticated=data.get("lastAuthenticated"),
            permissions=data.get("permissions") or [],
            user=BitbucketServerUser.from_raw(user_data) if user_data else None,
            token=data.get("token"),
        )
