"""
Configuración centralizada de la aplicación
"""
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Configuración de la aplicación"""

    # API Settings
    API_TITLE: str = "Content CMS API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "Backend del CMS multi-sitio (productos, blogs, FAQ, popups, proyectos)"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    API_DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Firestore (firebase-admin)
    # Empty credentials file -> application default credentials
    FIREBASE_CREDENTIALS_FILE: str = ""
    FIREBASE_PROJECT_ID: str = ""

    # Cloudinary
    # API key + secret -> signed uploads, otherwise unsigned uploads with the preset
    CLOUDINARY_CLOUD_NAME: str = ""
    CLOUDINARY_API_KEY: str = ""
    CLOUDINARY_API_SECRET: str = ""
    CLOUDINARY_UPLOAD_PRESET: str = ""

    # Auth (HS256 session tokens issued by the dashboard)
    AUTH_SECRET: str = ""

    # CMS behaviour
    AUDIT_LOG_FETCH_LIMIT: int = 500
    BATCH_CHUNK_SIZE: int = 200
    LONG_PRESS_MS: int = 2000

    # CORS - Can be string (comma-separated) or JSON array
    # Example: "http://localhost:3000,https://yourdomain.com" or '["http://localhost:3000"]'
    ALLOWED_ORIGINS: Optional[str] = "http://localhost:3000,http://localhost:3001"

    def get_allowed_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS string into list"""
        if not self.ALLOWED_ORIGINS:
            return ["http://localhost:3000"]

        # Try JSON parse first (for array format)
        import json
        try:
            origins = json.loads(self.ALLOWED_ORIGINS)
            if isinstance(origins, list):
                return origins
        except (json.JSONDecodeError, ValueError):
            pass

        # Fall back to comma-separated string
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    @property
    def cloudinary_configured(self) -> bool:
        """Cloudinary needs a cloud name plus either API credentials or an upload preset"""
        if not self.CLOUDINARY_CLOUD_NAME:
            return False
        signed = bool(self.CLOUDINARY_API_KEY and self.CLOUDINARY_API_SECRET)
        return signed or bool(self.CLOUDINARY_UPLOAD_PRESET)

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
