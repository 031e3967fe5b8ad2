"""Pydantic data models for the identity-manager payloads this tool touches.

Only the fields the engine reads or writes are declared; everything else the
backend sends is kept (``extra="allow"``) or ignored.
"""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, Field


class TokenResponse(BaseModel):
    """Body of a successful OAuth2 client-credentials grant."""

    access_token: str = Field(min_length=1)
    token_type: str = "Bearer"
    expires_in: Optional[int] = None

    model_config = {"populate_by_name": True}


class ScimResource(BaseModel):
    """A single SCIM user or group as returned by a filtered lookup."""

    id: str = Field(min_length=1)
    userName: Optional[str] = None
    displayName: Optional[str] = None

    model_config = {"populate_by_name": True, "extra": "allow"}


class ScimListResponse(BaseModel):
    """SCIM list response.

    The standard spells the list ``Resources``; some deployments answer with
    ``resources``.  Both are accepted.
    """

    resources: List[ScimResource] = Field(
        default_factory=list,
        validation_alias=AliasChoices("Resources", "resources"),
    )
    totalResults: Optional[int] = None

    model_config = {"populate_by_name": True}


class EntitlementListing(BaseModel):
    """Entitlement definitions for one subject; entries are kept opaque."""

    items: List[Any] = Field(default_factory=list)

    model_config = {"populate_by_name": True}


class EntitlementDefinition(BaseModel):
    """Request body binding a subject to a catalog item."""

    catalogItemId: str
    subjectType: str
    subjectId: str
    activationPolicy: str = "AUTOMATIC"

    model_config = {"populate_by_name": True}
