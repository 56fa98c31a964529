"""Gateway configuration."""

from movies_graph.shared.config import BaseServiceSettings


class GatewaySettings(BaseServiceSettings):
    """Settings specific to the FastAPI Gateway."""

    service_name: str = "gateway"
    host: str = "0.0.0.0"
    port: int = 8080
    cors_origins: list[str] = ["*"]
    request_timeout_secs: float = 20.0
    max_concurrency: int = 512
    gzip_min_size: int = 1000

    class Config(BaseServiceSettings.Config):
        env_prefix = "GATEWAY_"
