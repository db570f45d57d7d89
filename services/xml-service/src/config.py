"""Configuração do XML Service a partir de variáveis de ambiente (.env)"""

import os
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv


# Carregar variáveis de ambiente
load_dotenv()


@dataclass
class Settings:
    api_url: str
    api_key: str
    timeout: float
    schema_path: Optional[str]
    api_port: int
    log_level: str
    env: str


def get_settings() -> Settings:
    """Lê a configuração atual do ambiente"""
    return Settings(
        api_url=os.getenv('INTELLISOURCE_API_URL', 'http://localhost:8080/intellisource').rstrip('/'),
        api_key=os.getenv('INTELLISOURCE_API_KEY', ''),
        timeout=float(os.getenv('INTELLISOURCE_TIMEOUT', 30)),
        schema_path=os.getenv('REQUEST_SCHEMA_PATH') or None,
        api_port=int(os.getenv('API_PORT', 5000)),
        log_level=os.getenv('LOG_LEVEL', 'INFO').upper(),
        env=os.getenv('ENV', 'development'),
    )
