from fastapi import FastAPI, Request
from typing import Optional
import uvicorn
import logging
import sys
import time
from status_service.config import AppConfig, DOTENV_PATH, ENV_LOADED, LOG_LEVEL, is_hosted, load_config
from status_service.routers import fallback, status
from status_service.utils import PathNormalizer

logger = logging.getLogger("StatusService")


def setup_logging(hosted: bool) -> None:
    # Cloud Run stamps every line itself; only local runs need a timestamp
    if hosted:
        fmt = "[%(levelname)s] %(message)s"
    else:
        fmt = "%(asctime)s.%(msecs)03d [%(levelname)s] %(message)s"
    logging.basicConfig(
        level=LOG_LEVEL,
        format=fmt,
        datefmt="%Y/%m/%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)]
    )


def create_app(config: Optional[AppConfig] = None) -> FastAPI:
    if config is None:
        config = load_config()

    app = FastAPI(title="Status Service", description="Runtime identity snapshot", version=config.version)
    app.state.config = config
    # Added before access_log so the access log sees the path as requested
    app.add_middleware(PathNormalizer)

    @app.middleware("http")
    async def access_log(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        url = request.url.path
        if request.url.query:
            url += "?" + request.url.query
        length = response.headers.get("content-length", "-")
        logger.info(f"{request.method} {url} {response.status_code} {length} - {elapsed_ms:.3f} ms")
        return response

    # Include Routers (fallback last, it matches everything)
    app.include_router(status.router, tags=["status"])
    app.include_router(fallback.router)
    app.add_exception_handler(404, fallback.routing_miss_handler)
    app.add_exception_handler(405, fallback.routing_miss_handler)

    return app


class ListeningServer(uvicorn.Server):
    def bound_port(self) -> int:
        # PORT=0 lets the OS pick; report what was actually bound
        for server in getattr(self, "servers", None) or []:
            for sock in server.sockets:
                return sock.getsockname()[1]
        return self.config.port

    async def startup(self, sockets=None) -> None:
        await super().startup(sockets=sockets)
        if self.started:
            # Force print to ensure capture in log file
            print(f"Server Listening on {self.bound_port()}", flush=True)


def main() -> None:
    setup_logging(is_hosted())
    # Blocks until the service identity is known (or given up on)
    config = load_config()
    logger.info(f"[CFG] VERSION={config.version} PORT={config.port} HOSTED={config.hosted} ENV_SOURCE={'dotenv' if ENV_LOADED else 'osenv'} DOTENV_PATH_USED={DOTENV_PATH}")
    app = create_app(config)
    server = ListeningServer(
        uvicorn.Config(
            app,
            host="0.0.0.0",
            port=config.port,
            access_log=False,
            log_config=None,
            proxy_headers=True,
            forwarded_allow_ips="*",
        )
    )
    server.run()


if __name__ == "__main__":
    main()
