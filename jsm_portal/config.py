from dataclasses import dataclass
import os
from dotenv import load_dotenv


load_dotenv()

ATTACHMENT_POLICIES = ("abort", "skip")

@dataclass(frozen=True)
class JSMConfig:
    base_url: str
    email: str
    api_token: str
    cloud_id: str | None = None
    forms_base_url: str = "https://api.atlassian.com/jira/forms/cloud"
    timeout_seconds: float = 10.0

@dataclass(frozen=True)
class SubmissionConfig:
    attachment_failure_policy: str = "abort"
    field_mapping_path: str | None = None

def _get_required_env(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Environment variable {name} is required but not set")
    return value

def _get_float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise RuntimeError(f"Environment variable {name} must be a number, got {raw!r}") from exc

def load_jsm_config() -> JSMConfig:
    base_url = _get_required_env("JSM_BASE_URL")
    email = _get_required_env("JIRA_API_EMAIL")
    api_token = _get_required_env("JIRA_API_KEY")

    return JSMConfig(
        base_url=base_url.rstrip("/"),
        email=email,
        api_token=api_token,
        cloud_id=os.getenv("JIRA_CLOUD_ID") or None,
        timeout_seconds=_get_float_env("JSM_TIMEOUT_SECONDS", 10.0),
    )

def load_submission_config() -> SubmissionConfig:
    policy = (os.getenv("ATTACHMENT_FAILURE_POLICY") or "abort").strip().lower()
    if policy not in ATTACHMENT_POLICIES:
        raise RuntimeError(
            f"ATTACHMENT_FAILURE_POLICY must be one of {', '.join(ATTACHMENT_POLICIES)}, got {policy!r}"
        )

    return SubmissionConfig(
        attachment_failure_policy=policy,
        field_mapping_path=os.getenv("FIELD_MAPPING_PATH") or None,
    )

def load_log_level() -> str:
    return (os.getenv("LOG_LEVEL") or "INFO").upper()
