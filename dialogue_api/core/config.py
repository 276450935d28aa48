from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, SecretStr


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # MongoDB
    mongodb_uri: str = Field(
        default="mongodb://localhost:27017/dialogues", alias="MONGODB_URI"
    )
    mongodb_database: Optional[str] = Field(
        default=None, alias="MONGODB_DATABASE"
    )  # если не задано, база из URI
    mongodb_collection: str = Field(
        default="dialogues", alias="MONGODB_COLLECTION"
    )

    # Google Drive
    google_credentials: Optional[SecretStr] = Field(
        default=None, alias="GOOGLE_CREDENTIALS"
    )  # JSON сервисного аккаунта целиком
    drive_folder_id: str = Field(
        default="1xA6Ckfyi_mXEES4h_olxmnJm2i8ueECR", alias="DRIVE_FOLDER_ID"
    )
    drive_page_size: int = Field(default=1000, alias="DRIVE_PAGE_SIZE")
    audio_chunk_size: int = Field(
        default=1024 * 1024, alias="AUDIO_CHUNK_SIZE"
    )  # байт на один запрос к Drive при стриминге

    # HTTP
    cors_origins: List[str] = Field(default=["*"], alias="CORS_ORIGINS")
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=3000, alias="PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")


settings = Settings()
