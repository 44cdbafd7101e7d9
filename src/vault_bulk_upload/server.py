"""HTTP proxy exposing the Vault gateway to a browser front end.

Browsers cannot talk to most Vault servers directly because of CORS, so
the front end posts its requests here and the proxy forwards them to the
Vault URL given in each request body.
"""

from collections.abc import Callable, Iterator

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from icecream import ic
from pydantic import BaseModel, ConfigDict, Field

from vault_bulk_upload import __version__, console
from vault_bulk_upload.core.gateway import VaultGateway

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000


class ProxyRequest(BaseModel):
    """Fields shared by every proxied request."""

    model_config = ConfigDict(populate_by_name=True)

    url: str = ""
    token: str = ""
    namespace: str | None = None


class AppRoleRequest(ProxyRequest):
    role_id: str = Field(default="", alias="roleId")
    secret_id: str = Field(default="", alias="secretId")


class SecretRequest(ProxyRequest):
    path: str = ""
    secret_name: str = Field(default="", alias="secretName")
    data: dict[str, str] | None = None


def _failure(status: int | None, error: str) -> JSONResponse:
    return JSONResponse(status_code=status or 500, content={"success": False, "error": error})


def create_app(gateway_factory: Callable[[], VaultGateway] = VaultGateway) -> FastAPI:
    """Build the proxy application.

    Each request gets its own gateway, closed once the response is sent.
    Failed Vault calls answer with Vault's own status code, or 500 when no
    response was received, and a {"success": false, "error": ...} body.

    Args:
        gateway_factory: Creates the gateway used by a single request.

    Returns:
        The FastAPI application.

    """

    def get_gateway() -> Iterator[VaultGateway]:
        gateway = gateway_factory()
        try:
            yield gateway
        finally:
            gateway.close()

    app = FastAPI(title="vault-bulk-upload proxy", version=__version__)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "X-Vault-Token", "X-Vault-Namespace"],
    )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        console.error(f"Proxy error on {request.url.path}: {exc}")
        return _failure(500, str(exc))

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/vault/test")
    def test_connection(body: ProxyRequest, gateway: VaultGateway = Depends(get_gateway)):
        if not body.url or not body.token:
            return _failure(500, "URL and token are required")
        return {"success": gateway.test_connection(body.url, body.token)}

    @app.post("/api/vault/auth/token")
    def auth_token(body: ProxyRequest, gateway: VaultGateway = Depends(get_gateway)):
        result = gateway.authenticate_token(body.url, body.token, body.namespace)
        if result.success:
            return {"success": True, "token": result.token}
        console.error(f"Token auth error: {result.error}")
        return _failure(result.status, result.error or "Vault auth failed")

    @app.post("/api/vault/auth/approle")
    def auth_approle(body: AppRoleRequest, gateway: VaultGateway = Depends(get_gateway)):
        result = gateway.authenticate_approle(body.url, body.role_id, body.secret_id, body.namespace)
        if result.success:
            return {"success": True, "token": result.token}
        console.error(f"AppRole auth error: {result.error}")
        return _failure(result.status, result.error or "AppRole authentication failed")

    @app.post("/api/vault/secrets")
    def write_secret(body: SecretRequest, gateway: VaultGateway = Depends(get_gateway)):
        if not (body.url and body.token and body.path and body.secret_name and body.data is not None):
            return _failure(500, "Missing required parameters")
        ic(body.path, body.secret_name)
        result = gateway.write_secret(
            body.url,
            body.token,
            body.path,
            body.secret_name,
            body.data,
            namespace=body.namespace,
        )
        if result.success:
            return {"success": True}
        console.error(f"Secret upload error: {result.error}")
        return _failure(result.status, result.error or "Failed to store secret")

    return app


def run_server(host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> None:
    """Serve the proxy with uvicorn until interrupted.

    Args:
        host: Interface to bind.
        port: Port to listen on.

    """
    console.info(f"Vault proxy backend running at {console.highlight(f'http://{host}:{port}')}")
    uvicorn.run(create_app(), host=host, port=port)
