"""FastAPI entry point for etlgraph."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from etlgraph import __version__
from etlgraph.api.graphs import router as graphs_router
from etlgraph.api.nodes import router as nodes_router
from etlgraph.api.plugins import router as plugins_router
from etlgraph.api.ws import router as ws_router
from etlgraph.config import Settings
from etlgraph.services import Services


def create_app(settings: Settings | None = None, services: Services | None = None) -> FastAPI:
    """Build the application around one Services instance."""
    if services is None:
        services = Services(settings or Settings.from_env())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        try:
            yield
        finally:
            services.shutdown()

    app = FastAPI(title="etlgraph", version=__version__, lifespan=lifespan)
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:5173"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(graphs_router)
    app.include_router(nodes_router)
    app.include_router(plugins_router)
    app.include_router(ws_router)

    @app.get("/api/health")
    async def health():
        return {
            "status": "ok",
            "version": __version__,
            "plugins": len(services.plugins.list_definitions()),
        }

    @app.get("/api/logs")
    async def logs(limit: int = 200):
        entries = services.logs.entries()[-limit:] if limit > 0 else []
        return [
            {"timestamp": e.timestamp.isoformat(), "level": e.level,
             "source": e.source, "message": e.message}
            for e in entries
        ]

    return app


def main(host: str = "0.0.0.0", port: int = 8000, reload: bool = False):
    import uvicorn

    uvicorn.run("etlgraph.app:create_app", factory=True, host=host, port=port, reload=reload)


if __name__ == "__main__":
    main()
