import os
from pydantic import BaseModel, Field
from dotenv import load_dotenv

# load .env once at startup
load_dotenv()


class Settings(BaseModel):
    gemini_api_key: str | None = Field(alias="GEMINI_API_KEY")
    gemini_model: str = Field(default="gemini-2.5-flash", alias="GEMINI_MODEL")
    emission_factor_profile: str = Field(default="canonical", alias="EMISSION_FACTOR_PROFILE")
    forecast_horizon: int = Field(default=6, alias="FORECAST_HORIZON")
    estimated_quantity: float = Field(default=1000.0, alias="ESTIMATED_QUANTITY")
    openlca_url: str = Field(
        default="https://nexus.openlca.org/api/v1/processes", alias="OPENLCA_URL"
    )
    industry_average_timeout: float = Field(default=10.0, alias="INDUSTRY_AVERAGE_TIMEOUT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @classmethod
    def from_env(cls):
        data = {
            "GEMINI_API_KEY": os.getenv("GEMINI_API_KEY"),
            "GEMINI_MODEL": os.getenv("GEMINI_MODEL", "gemini-2.5-flash"),
            "EMISSION_FACTOR_PROFILE": os.getenv("EMISSION_FACTOR_PROFILE", "canonical"),
            "FORECAST_HORIZON": os.getenv("FORECAST_HORIZON", "6"),
            "ESTIMATED_QUANTITY": os.getenv("ESTIMATED_QUANTITY", "1000"),
            "OPENLCA_URL": os.getenv(
                "OPENLCA_URL", "https://nexus.openlca.org/api/v1/processes"
            ),
            "INDUSTRY_AVERAGE_TIMEOUT": os.getenv("INDUSTRY_AVERAGE_TIMEOUT", "10"),
            "LOG_LEVEL": os.getenv("LOG_LEVEL", "INFO"),
        }
        return cls.model_validate(data)


settings = Settings.from_env()
