from pydantic import BaseModel, ConfigDict


class ResponseModel(BaseModel):
    """Base for every provider response type: immutable, unknown fields ignored."""

    model_config = ConfigDict(extra="ignore", frozen=True)
