"""Job configuration, resolved once at startup and passed to every component."""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field

UAT = "uat"
PRODUCTION = "prod"


class SalesforceCredentials(BaseModel):
    """OAuth password-flow credentials for one CRM org."""

    oauth_url: str = Field(..., description="Token endpoint, e.g. https://login.salesforce.com/services/oauth2/token")
    username: str
    password: str
    grant_type: str = "password"
    client_id: str
    client_secret: str
    api_version: str = "v52.0"


class EnvironmentConfig(BaseModel):
    """Trigger key plus CRM credentials for one environment (prod or uat)."""

    api_key: str = Field(..., description="Value the trigger's Authorization parameter must match")
    salesforce: SalesforceCredentials


class FirebaseConfig(BaseModel):
    """Realtime Database location of the watermark document."""

    database_url: str = ""
    auth_token: Optional[str] = None
    root: str = "GoogleSearchPaidAdsReportRunDates"
    child_key: str = "lastRunDateTimes"


class MailgunConfig(BaseModel):
    api_key: str = ""
    domain: str = ""
    base_url: str = "https://api.mailgun.net/v3"
    username: str = "api"


class NotificationConfig(BaseModel):
    """Fixed sender and destination of the report email."""

    sender: str
    recipient: str
    subject_prefix: str = "Google Search Paid Ads conversion report"
    alert_recipient: Optional[str] = None

    @property
    def alert_to(self) -> str:
        return self.alert_recipient or self.recipient


class JobConfig(BaseModel):
    """Complete configuration of the report job."""

    production: EnvironmentConfig
    uat: Optional[EnvironmentConfig] = None
    firebase: FirebaseConfig = Field(default_factory=FirebaseConfig)
    mailgun: MailgunConfig = Field(default_factory=MailgunConfig)
    notification: NotificationConfig
    http_timeout: float = 60.0
    log_level: str = "INFO"

    def environment(self, name: Optional[str]) -> EnvironmentConfig:
        """'uat' selects the UAT block; anything else selects production."""
        if is_uat(name):
            if self.uat is None:
                raise ValueError("UAT environment requested but no uat configuration is set")
            return self.uat
        return self.production

    @classmethod
    def from_yaml(cls, path: str | Path) -> "JobConfig":
        """Load config from a YAML file laid out like the model."""
        data = yaml.safe_load(Path(path).read_text()) or {}
        return cls.model_validate(data)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "JobConfig":
        """
        Build config from environment variables.
        UAT variables use the same names with a _UAT suffix; the uat block is
        only built when MARKETING_API_KEY_UAT is set.
        """
        env = os.environ if environ is None else environ

        def _environment(suffix: str) -> EnvironmentConfig:
            def _get(name: str, default: str = "") -> str:
                return env.get(f"{name}{suffix}", default)

            return EnvironmentConfig(
                api_key=_get("MARKETING_API_KEY"),
                salesforce=SalesforceCredentials(
                    oauth_url=_get("SFDC_OAUTH_URL"),
                    username=_get("SFDC_USERNAME"),
                    password=_get("SFDC_PASSWORD"),
                    grant_type=_get("SFDC_GRANT_TYPE", "password") or "password",
                    client_id=_get("SFDC_CLIENT_ID"),
                    client_secret=_get("SFDC_CLIENT_SECRET"),
                    api_version=_get("SFDC_API_VERSION", "v52.0") or "v52.0",
                ),
            )

        firebase = FirebaseConfig(
            database_url=env.get("FIREBASE_DATABASE_URL", ""),
            auth_token=env.get("FIREBASE_AUTH_TOKEN") or None,
        )
        if env.get("FIREBASE_WATERMARK_ROOT"):
            firebase = firebase.model_copy(update={"root": env["FIREBASE_WATERMARK_ROOT"]})

        return cls(
            production=_environment(""),
            uat=_environment("_UAT") if env.get("MARKETING_API_KEY_UAT") else None,
            firebase=firebase,
            mailgun=MailgunConfig(
                api_key=env.get("MAILGUN_API_KEY", ""),
                domain=env.get("MAILGUN_DOMAIN", ""),
                username=env.get("MAILGUN_USERNAME", "api") or "api",
            ),
            notification=NotificationConfig(
                sender=env.get("REPORT_SENDER", ""),
                recipient=env.get("REPORT_RECIPIENT", ""),
                alert_recipient=env.get("REPORT_ALERT_RECIPIENT") or None,
            ),
            http_timeout=float(env.get("HTTP_TIMEOUT", "60")),
            log_level=env.get("LOG_LEVEL", "INFO"),
        )


def is_uat(name: Optional[str]) -> bool:
    return (name or "").strip().lower() == UAT


def load_config(path: Optional[str | Path] = None) -> JobConfig:
    """YAML file when a path is given, environment variables otherwise."""
    if path is not None:
        return JobConfig.from_yaml(path)
    return JobConfig.from_env()
