from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator


class Target(BaseModel):
    """
    Data model representing an endpoint to be health-checked.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    label: str
    url: str
    method: Literal["GET", "HEAD"] = "GET"

    @field_validator("method", mode="before")
    @classmethod
    def _upper_method(cls, value):
        if isinstance(value, str):
            return value.upper()
        return value

    def __repr__(self):
        return f"Target(key={self.key}, method={self.method}, url={self.url})"
