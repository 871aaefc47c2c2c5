from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from contracts.target import Target


class ProbeResult(BaseModel):
    """
    Data model representing the outcome of a single probe against a target.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    key: str
    label: str
    url: str
    ok: bool
    status: int = 0
    latency_ms: int = Field(default=0, alias="latency")
    error: Optional[str] = None

    @classmethod
    def for_target(cls, target: Target, **fields) -> "ProbeResult":
        """
        Build a result carrying the identifying fields of the given target.

        Args:
            target (Target): The probed target.
            **fields: Outcome fields (ok, status, latency_ms, error).

        Returns:
            ProbeResult: The new result.
        """
        return cls(key=target.key, label=target.label, url=target.url, **fields)
