import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class Settings(BaseModel):
    app_name: str = Field(default=os.getenv("APP_NAME", "PON Topology Planner"))
    log_level: str = Field(default=os.getenv("LOG_LEVEL", "INFO"))
    log_json: bool = Field(default=_env_bool("LOG_JSON", "false"))

    # Topology planning rules, read once at startup
    topology_max_passive_loss_db: float = Field(
        default=float(os.getenv("TOPOLOGY_MAX_PASSIVE_LOSS_DB", "20"))
    )
    topology_direct_subscriber_threshold: int = Field(
        default=int(os.getenv("TOPOLOGY_DIRECT_SUBSCRIBER_THRESHOLD", "12"))
    )
    topology_top_olt: int = Field(default=int(os.getenv("TOPOLOGY_TOP_OLT", "3")))
    topology_top_splitters: int = Field(
        default=int(os.getenv("TOPOLOGY_TOP_SPLITTERS", "5"))
    )

    @field_validator("log_level", mode="after")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.strip().upper() or "INFO"

    @field_validator(
        "topology_direct_subscriber_threshold",
        "topology_top_olt",
        "topology_top_splitters",
        mode="after",
    )
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be a positive integer")
        return v

    @field_validator("topology_max_passive_loss_db", mode="after")
    @classmethod
    def validate_loss_ceiling(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("must be greater than zero")
        return v

    class Config:
        frozen = True


settings = Settings()
