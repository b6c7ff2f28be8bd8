from dataclasses import dataclass
import os

from dotenv import load_dotenv


load_dotenv()


@dataclass(frozen=True)
class Settings:
    app_name: str
    database_url: str
    log_level: str
    invoices_view: str


def get_settings() -> Settings:
    return Settings(
        app_name=os.getenv("APP_NAME", "invoicekit"),
        database_url=os.getenv("DATABASE_URL", "sqlite:///./invoices.db"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        invoices_view=os.getenv("INVOICES_VIEW", "/dashboard/invoices"),
    )
