"""Resource model — a machine/VM that executes tasks one at a time."""

from pydantic import BaseModel, Field


class Resource(BaseModel):
    """A processing unit with a fixed speed and a ready time."""

    id: int = Field(ge=0, description="Unique resource identifier")
    speed: float = Field(description="Work units processed per time unit")
    ready_time: float = Field(default=0.0, ge=0, description="Time at which the resource becomes free")

    def __repr__(self) -> str:
        return f"Resource(id={self.id}, speed={self.speed}, ready={self.ready_time})"
