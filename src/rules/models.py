from pydantic import BaseModel, ConfigDict, Field, field_validator

PLACEHOLDER_MARKER = "<#"


class GateSection(BaseModel):
    config_endpoint: str = "https://birrdheallth.com/config.php"
    request_timeout_seconds: float = Field(default=10.0, gt=0)
    min_loading_seconds: float = Field(default=2.0, ge=0)
    attribution_debounce_seconds: float = Field(default=0.5, ge=0)

    @property
    def endpoint_is_placeholder(self) -> bool:
        endpoint = self.config_endpoint.strip()
        return not endpoint or PLACEHOLDER_MARKER in endpoint


class DeviceSection(BaseModel):
    bundle_id: str = "com.chickenpethealth.app"
    os: str = "iOS"
    store_id: str | None = "id6754849548"
    locale: str | None = None  # system locale when unset
    push_token_fallback: str = (
        "dl28EJCAT4a7UNl86egX-U:APA91bEC1a5aGJL8ZyQHlm-B9togw60MLWP4_zU0ExSXLSa_"
        "HiL82Iurj0d-1zJmkMdUcvgCRXTrXtbWQHxmJh49BibLiqZVXPNyrCdZW-_ROTt98f0WCLtt"
        "531RYPhWSDOkykcaykE3"
    )
    firebase_project_id_fallback: str = "8934278530"
    firebase_project_id: str | None = None


class NotificationsSection(BaseModel):
    cooldown_days: float = Field(default=3, gt=0)


class RedirectsSection(BaseModel):
    max_hops: int = Field(default=80, ge=1)
    hop_timeout_seconds: float = Field(default=8.0, gt=0)


class DestinationSection(BaseModel):
    augment: bool = True
    sub_id_count: int = Field(default=5, ge=0, le=10)


class StorageSection(BaseModel):
    db_path: str = "gate.db"


class LoggingSection(BaseModel):
    level: str = "INFO"

    @field_validator("level")
    @classmethod
    def _upper(cls, value: str) -> str:
        return value.upper()


class Rules(BaseModel):
    model_config = ConfigDict(extra="forbid")

    gate: GateSection = Field(default_factory=GateSection)
    device: DeviceSection = Field(default_factory=DeviceSection)
    notifications: NotificationsSection = Field(default_factory=NotificationsSection)
    redirects: RedirectsSection = Field(default_factory=RedirectsSection)
    destination: DestinationSection = Field(default_factory=DestinationSection)
    storage: StorageSection = Field(default_factory=StorageSection)
    logging: LoggingSection = Field(default_factory=LoggingSection)
