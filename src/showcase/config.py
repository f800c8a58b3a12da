from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 5000
    debug: bool = False
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    jwt_expire_days: int = 30
    cors_origins: list[str] = []
    media_path: str  # Directory path for storing uploaded media
    media_url: str  # Public base URL media is served from, e.g. https://api.example.com/media
    max_image_size: int = 5 * 1024 * 1024  # Bytes per uploaded image
    max_video_size: int = 100 * 1024 * 1024  # Bytes per uploaded video
    # Build metadata injected during Docker build via environment variables
    git_commit_hash: str = "unknown"
    build_time: str = "unknown"

    model_config = {
        "env_file": [".env"],
        "env_prefix": "SHOWCASE_",
        "extra": "ignore",
    }
