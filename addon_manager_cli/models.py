"""Pydantic schemas for addon collection entries.

Only the fields the editor touches are declared. Everything else the server
sends is kept as model extras so it round-trips untouched. Declared fields
are optional and accept null, because entries come back from the server in
whatever shape other clients left them.
"""

from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

PASS_THROUGH = ConfigDict(extra="allow", populate_by_name=True)


class Catalog(BaseModel):
    """Named sub-listing within a manifest."""

    model_config = PASS_THROUGH

    name: str | None = Field(None, description="Catalog display name")


class Manifest(BaseModel):
    """Presentation and behavior metadata for one addon."""

    model_config = PASS_THROUGH

    id: Any = Field(None, description="Stable addon identifier, if the addon declares one")
    name: str | None = Field(None, description="Display name")
    description: str | None = Field(None, description="Free-form description")
    logo: str | None = Field(None, description="Logo URL")
    background: str | None = Field(None, description="Background image URL")
    catalogs: list[Catalog] | None = Field(None, description="Ordered catalogs served by the addon")


class AddonFlags(BaseModel):
    """Optional flag bag attached to an entry."""

    model_config = PASS_THROUGH

    # Kept exactly as sent; only its truthiness matters here
    protected: Any = Field(None, description="Entry cannot be removed through the normal UI path")


class AddonEntry(BaseModel):
    """One member of the user's addon collection."""

    model_config = PASS_THROUGH

    manifest: Manifest | None = None
    transport_url: str | None = Field(None, alias="transportUrl", description="URL the manifest is served from")
    transport_name: str | None = Field(None, alias="transportName")
    flags: AddonFlags | None = Field(None, description="Entry flags (protected, official, ...)")

    @property
    def is_protected(self) -> bool:
        return bool(self.flags and self.flags.protected)

    @property
    def manifest_id(self) -> str | None:
        """Manifest id as text, whatever type the server used for it."""
        if self.manifest is None or self.manifest.id is None:
            return None
        return str(self.manifest.id)

    @property
    def key(self) -> str | None:
        """Stable identity: manifest id, falling back to the transport URL."""
        return self.manifest_id or self.transport_url

    @property
    def display_name(self) -> str:
        name = self.manifest.name if self.manifest else None
        return name or "(unnamed)"

    @property
    def manifest_catalogs(self) -> list[Catalog]:
        """The manifest's catalogs, empty when the manifest or its list is missing."""
        if self.manifest is None:
            return []
        return self.manifest.catalogs or []

    def to_wire(self) -> dict[str, Any]:
        """Serialize exactly the keys the server sent plus any edited ones."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> "AddonEntry":
        return cls.model_validate(data)


class ApiSettings(BaseModel):
    """Resolved remote API configuration."""

    url: str = Field("https://api.strem.io/api/", description="Base URL of the collection API")
    timeout: float = Field(10.0, description="Request timeout in seconds")

    def endpoint(self, method: str) -> str:
        return f"{self.url.rstrip('/')}/{method}"
