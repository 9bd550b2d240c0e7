from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ProviderNodeRef(BaseModel):
    """
    Graph node backed by a vertex of the map-data provider.
    Attributes:
        id (int): Vertex ID assigned by the provider.
    """

    model_config = ConfigDict(frozen=True)

    # Default factory hides default value in OpenAPI schema
    kind: Literal["provider"] = Field(default_factory=lambda: "provider")
    id: int

    def __str__(self) -> str:
        return f"provider:{self.id}"


class SyntheticNodeRef(BaseModel):
    """
    Graph node injected by the router itself, e.g. a request origin
    or a vertex of the fallback grid. Never equal to a provider node,
    even when the tag looks like a provider ID.
    Attributes:
        tag (str): Identifier unique among synthetic nodes.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["synthetic"] = Field(default_factory=lambda: "synthetic")
    tag: str

    def __str__(self) -> str:
        return f"synthetic:{self.tag}"


NodeRef = ProviderNodeRef | SyntheticNodeRef
