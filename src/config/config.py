import os
from typing import List, Mapping, Optional

from contracts.prober_config import ProberConfig
from contracts.target import Target

DEFAULT_SITE_URL = "https://youroasis.gr/"
DEFAULT_API_URL = "https://youroasis.gr/api/health"

DEFAULT_TIMEOUT_MS = "8000"
DEFAULT_USER_AGENT = "oasis-status/1.0"

TRUTHY = {"1", "true", "yes", "on"}


def build_targets(env: Optional[Mapping[str, str]] = None) -> List[Target]:
    """
    Build the fixed list of targets from environment variables.

    Args:
        env (Optional[Mapping[str, str]]): Variables to read; defaults to os.environ.

    Returns:
        List[Target]: Targets in display order.
    """
    env = os.environ if env is None else env
    targets = [
        Target(
            key="site",
            label="Website",
            url=env.get("STATUS_CHECK_SITE", DEFAULT_SITE_URL),
            method="GET",
        ),
        Target(
            key="app",
            label="App (Homepage)",
            url=env.get("STATUS_CHECK_APP", DEFAULT_SITE_URL),
            method="HEAD",
        ),
        Target(
            key="api",
            label="Public API",
            url=env.get("STATUS_CHECK_API", DEFAULT_API_URL),
            method="GET",
        ),
    ]
    supabase_url = env.get("SUPABASE_URL")
    if supabase_url:
        targets.append(
            Target(
                key="supabase",
                label="Supabase Edge",
                url=f"{supabase_url.rstrip('/')}/rest/v1/",
                method="HEAD",
            )
        )
    return targets


def build_prober_config(env: Optional[Mapping[str, str]] = None) -> ProberConfig:
    """
    Build the prober settings from environment variables.

    Raises:
        ValueError: If STATUS_TIMEOUT_MS is not a positive integer.
    """
    env = os.environ if env is None else env
    raw_timeout = env.get("STATUS_TIMEOUT_MS", DEFAULT_TIMEOUT_MS)
    try:
        timeout_ms = int(raw_timeout)
    except ValueError:
        raise ValueError(f"STATUS_TIMEOUT_MS must be an integer, got {raw_timeout!r}")
    if timeout_ms <= 0:
        raise ValueError(f"STATUS_TIMEOUT_MS must be positive, got {timeout_ms}")
    return ProberConfig(
        timeout_ms=timeout_ms,
        user_agent=env.get("STATUS_USER_AGENT", DEFAULT_USER_AGENT),
        follow_redirects=env.get("STATUS_FOLLOW_REDIRECTS", "true").lower() in TRUTHY,
    )
