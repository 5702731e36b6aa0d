"""
Relation names used as keys under '_embedded'.
"""

from pydantic import BaseModel, ConfigDict, Field


class RelationName(BaseModel):
    """Singular and collection name bound to a resource type."""

    model_config = ConfigDict(frozen=True)

    singular: str = Field(min_length=1, description="Name used for a single embedded resource")
    plural: str = Field(min_length=1, description="Name used for a list of resources")
