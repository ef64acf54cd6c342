"""Configuração da aplicação."""
import logging
import os
import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from swagger_explorer.schema.models import Credential

logger = logging.getLogger(__name__)

DEFAULT_SERVICE_NAME = "default"
DEFAULT_SERVICE_URL = "http://localhost:8090/v3/api-docs"


@dataclass
class ServiceConfig:
    """Um serviço: nome e URL do documento OpenAPI."""

    name: str
    source_url: str


@dataclass
class HttpConfig:
    """Configuração HTTP."""

    timeout: int = 30

    @classmethod
    def from_env(cls) -> "HttpConfig":
        """Carrega config de variáveis de ambiente."""
        return cls(timeout=int(os.getenv("SWAGGER_TIMEOUT", "30")))


def parse_service_args(args: Iterable[str]) -> Dict[str, str]:
    """
    Interpreta argumentos de serviço.

    `name=url` registra um serviço nomeado; uma URL solta (http...) registra
    o serviço "default". Qualquer outra coisa é ignorada com aviso.
    """
    services: Dict[str, str] = {}
    for arg in args:
        # URL solta primeiro: a query string pode conter "="
        if arg.startswith(("http://", "https://")):
            services[DEFAULT_SERVICE_NAME] = arg
            logger.info(f"Registered default service: {arg}")
        elif "=" in arg:
            name, url = arg.split("=", 1)
            services[name] = url
            logger.info(f"Registered service '{name}': {url}")
        else:
            logger.warning(f"Ignoring invalid argument: {arg}. Expected format: name=url or http://...")
    return services


def split_service_list(raw: Optional[str]) -> List[str]:
    """Separa SWAGGER_SERVICES (lista separada por espaços e/ou vírgulas)."""
    return [item for item in re.split(r"[\s,]+", raw or "") if item]


def build_credential(
    user: Optional[str],
    password: Optional[str],
    login_path: Optional[str] = None,
) -> Optional[Credential]:
    """Só existe credencial quando usuário e senha foram informados."""
    if not user or not password:
        return None
    if login_path and not login_path.startswith(("/", "http")):
        login_path = f"/{login_path}"
    return Credential(user=user, password=password, login_path=login_path or None)


@dataclass
class AppConfig:
    """Configuração da aplicação."""

    services: List[ServiceConfig] = field(default_factory=list)
    credential: Optional[Credential] = None
    http: HttpConfig = None

    def __post_init__(self):
        """Inicializa valores padrão."""
        if self.http is None:
            self.http = HttpConfig.from_env()
        if not self.services:
            logger.info(f"No services configured. Using default: {DEFAULT_SERVICE_URL}")
            self.services = [ServiceConfig(DEFAULT_SERVICE_NAME, DEFAULT_SERVICE_URL)]

    @classmethod
    def from_args(
        cls,
        args: Iterable[str],
        user: Optional[str] = None,
        password: Optional[str] = None,
        login_path: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> "AppConfig":
        """Monta a config a partir dos argumentos da linha de comando."""
        services = parse_service_args(args)
        return cls(
            services=[ServiceConfig(name, url) for name, url in services.items()],
            credential=build_credential(user, password, login_path),
            http=HttpConfig(timeout=timeout) if timeout else None,
        )

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Carrega config de variáveis de ambiente."""
        return cls.from_args(
            split_service_list(os.getenv("SWAGGER_SERVICES")),
            user=os.getenv("SWAGGER_AUTH_USER"),
            password=os.getenv("SWAGGER_AUTH_PASS"),
            login_path=os.getenv("SWAGGER_LOGIN_PATH"),
        )
