"""Backend settings for the TSSR site survey service."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Server configuration read from ``TSSR_*`` environment variables or ``.env``."""

    # Storage
    database_url: str = 'sqlite:///tssr.db'
    upload_folder: str = 'uploads'

    # Uploads
    max_upload_size: int = 10 * 1024 * 1024  # per image
    max_batch_files: int = 20

    # Server
    host: str = '0.0.0.0'
    port: int = 5000

    # Logging
    log_level: str = 'INFO'
    log_dir: str = 'logs'
    log_max_bytes: int = 10 * 1024 * 1024
    log_backups: int = 5

    class Config:
        env_prefix = 'TSSR_'
        case_sensitive = False
        env_file = '.env'

    def flask_config(self):
        """Map settings onto the Flask config keys the app reads."""
        return {
            'SQLALCHEMY_DATABASE_URI': self.database_url,
            'UPLOAD_FOLDER': self.upload_folder,
            'MAX_IMAGE_SIZE': self.max_upload_size,
            'MAX_CONTENT_LENGTH': self.max_upload_size * self.max_batch_files,
        }
