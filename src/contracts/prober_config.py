from pydantic import BaseModel, ConfigDict, Field


class ProberConfig(BaseModel):
    """
    Explicit settings handed to the Prober; the core never reads the environment.
    """

    model_config = ConfigDict(frozen=True)

    timeout_ms: int = Field(default=8000, gt=0)
    user_agent: str = "oasis-status/1.0"
    follow_redirects: bool = True
