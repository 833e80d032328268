from pydantic import BaseModel, ConfigDict


class DriverConfig(BaseModel):
    name: str = "scapdriver"
    log_level: str = "INFO"
    logs_dir: str = "./logs"

    model_config = ConfigDict(extra="allow")
