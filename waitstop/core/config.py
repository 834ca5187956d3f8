from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    PROJECT_NAME: str = "Waitstop"
    PROJECT_DESCRIPTION: str = "Taxi, transit and taxi-then-transit trip comparison"
    VERSION: str = "0.3.0"
    API_V1_STR: str = "/api/v1"

    LOG_LEVEL: str = "INFO"
    # Comma-separated origins, "*" for development
    CORS_ORIGINS: str = "*"

    # TMap (geocoding + taxi estimate)
    TMAP_API_URL: str = "https://apis.openapi.sk.com/tmap"
    TMAP_APP_KEY: str = ""

    # ODsay (public transit itineraries)
    ODSAY_API_URL: str = "https://api.odsay.com/v1/api"
    ODSAY_API_KEY: str = ""

    PROVIDER_TIMEOUT_SECONDS: float = 10.0

    # Smart (taxi-then-transit) synthesis
    SMART_MAX_CANDIDATES: int = 5
    SMART_MIN_LEAD_IN_MINUTES: int = 10
    SMART_JUMP_TIME_RATIO: float = 0.5
    SMART_JUMP_TIME_BUFFER_MINUTES: int = 3
    SMART_JUMP_FARE_SURCHARGE: int = 3000

    @property
    def cors_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


settings = Settings()
