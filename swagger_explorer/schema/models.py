"""Modelos de dados compartilhados pelos módulos do explorer."""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class ServiceDescriptor:
    """Um serviço registrado: nome único e URL do documento OpenAPI."""

    name: str
    source_url: str
    base_url: str = ""  # Recalculado a cada (re)carga do documento


@dataclass(frozen=True)
class Credential:
    """Credenciais para auto-login. Imutável depois de lida da configuração."""

    user: str
    password: str
    login_path: Optional[str] = None


@dataclass(frozen=True)
class LoadedDocument:
    """Resultado de DocumentStore.get()."""

    document: Dict[str, Any]
    name: str
    base_url: str

    @property
    def title(self) -> str:
        return (self.document.get("info") or {}).get("title") or "Unknown"

    @property
    def paths(self) -> Dict[str, Dict[str, Any]]:
        return self.document.get("paths") or {}


@dataclass
class Endpoint:
    """Um endpoint (path + método) de um documento já carregado."""

    path: str
    method: str  # minúsculo: "get", "post", ...
    operation: Dict[str, Any]
    base_url: str
    service: str = ""
    document: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def request_body(self) -> Optional[Dict[str, Any]]:
        return self.operation.get("requestBody")


@dataclass
class RequestDescriptor:
    """Requisição HTTP completa, pronta para execução."""

    method: str  # maiúsculo
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    query_params: Dict[str, Any] = field(default_factory=dict)
    body: Optional[Any] = None

    def has_header(self, name: str) -> bool:
        """Verifica a presença de um header sem diferenciar maiúsculas."""
        lowered = name.lower()
        return any(key.lower() == lowered for key in self.headers)

    def with_header(self, name: str, value: str) -> "RequestDescriptor":
        """Retorna uma cópia com o header definido (substitui qualquer grafia existente)."""
        lowered = name.lower()
        headers = {k: v for k, v in self.headers.items() if k.lower() != lowered}
        headers[name] = value
        return RequestDescriptor(
            method=self.method,
            url=self.url,
            headers=headers,
            query_params=dict(self.query_params),
            body=self.body,
        )


@dataclass
class HttpResponse:
    """Resposta devolvida pelo transporte."""

    status: int
    status_text: str = ""
    headers: Dict[str, str] = field(default_factory=dict)
    body: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


@dataclass
class ApiResponse:
    """Saída de debug_endpoint: resposta bem-sucedida ou erro reportado."""

    status: Optional[int] = None
    status_text: str = ""
    headers: Dict[str, str] = field(default_factory=dict)
    body: Any = None
    is_error: bool = False
    message: str = ""
    retried: bool = False

    @classmethod
    def from_http(cls, response: HttpResponse, retried: bool = False) -> "ApiResponse":
        return cls(
            status=response.status,
            status_text=response.status_text,
            headers=dict(response.headers),
            body=response.body,
            is_error=not response.ok,
            retried=retried,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Converte para dicionário."""
        result: Dict[str, Any] = {
            "status": self.status,
            "statusText": self.status_text,
            "headers": self.headers,
            "data": self.body,
        }
        if self.is_error:
            result["error"] = True
        if self.message:
            result["message"] = self.message
        if self.retried:
            result["retried"] = True
        return result


@dataclass
class SearchMatch:
    """Resultado de busca com pontuação."""

    service: str
    method: str
    path: str
    summary: str
    score: int

    def to_line(self) -> str:
        return f"[{self.service}] [{self.method.upper()}] {self.path} - {self.summary or 'No summary'}"
