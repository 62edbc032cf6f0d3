# techsteps/main.py

"""
Main FastAPI application factory.
Wires up the guide, safety and discovery routers.
"""

from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from techsteps.core.settings import settings
from techsteps.api.deps import require_api_key

from techsteps.api.guide_routes import router as guide_router
from techsteps.api.safety_routes import router as safety_router
from techsteps.api.orchestrator import router as discovery_router


def create_app() -> FastAPI:
    app = FastAPI(title="TechSteps Guide API", version=settings.schema_version)

    # allow reverse proxies
    app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # no-op when settings.api_key is unset
    app.router.dependencies.append(Depends(require_api_key))

    app.include_router(guide_router)
    app.include_router(safety_router)
    app.include_router(discovery_router)

    return app


app = create_app()
