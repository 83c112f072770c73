"""
Periferia Social Backend — Shared Pydantic Schemas
===================================================

What:  Base model configuration and the response shapes shared by every route.
Why:   The client speaks camelCase JSON (`likesCount`, `currentPassword`);
       Python code keeps snake_case. One alias generator bridges the two.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base for all API schemas.

    alias_generator=to_camel: fields serialize (and parse) as camelCase
    populate_by_name=True:    services can still construct with snake_case
    from_attributes=True:     schemas accept ORM rows as input
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(CamelModel):
    """Plain acknowledgement returned by update, like and password change."""
    message: str = Field(description="Human-readable result")


class ErrorResponse(CamelModel):
    """
    What:  Error envelope for every failed request.
    Why:   Clients parse one shape; the HTTP status carries the error kind.

    Example:
        {"message": "Post not found"}
    """
    message: str = Field(description="Human-readable error description")


class HealthResponse(CamelModel):
    """Returned by GET /health for container and load balancer probes."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
