# type: ignore
# pyright: reportGeneralTypeIssues=false
"""
Guild Roster Service
====================
Organizes guild members into five-seat parties grouped under groups, for two
independent activity types (kvm, gvg).

Every roster mutation runs as one locked unit of work per account:
    lock ─► load snapshot ─► mutate slots ─► resync member back-references ─► commit

Port: 8010
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from guild_roster.controllers import (
    assignment_controller,
    group_controller,
    member_controller,
    party_controller,
    roster_controller,
    system_controller,
)
from guild_roster.core.config import settings
from guild_roster.core.dependencies import get_store
from guild_roster.core.logging import get_logger
from guild_roster.middleware import MetricsMiddleware, RequestContextMiddleware
from guild_roster.repositories.document_store import SqlDocumentStore

logger = get_logger("guild-roster")


@asynccontextmanager
async def lifespan(application: FastAPI):
    store = get_store()
    if isinstance(store, SqlDocumentStore):
        store.ensure_schema()
    logger.info(
        "Service started: version=%s store=%s",
        settings.SERVICE_VERSION, type(store).__name__,
    )
    yield
    logger.info("Service stopped")


app = FastAPI(
    title="Guild Roster Service",
    description="Party and group roster management with slot assignment rules.",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestContextMiddleware)

app.include_router(system_controller.router)
app.include_router(group_controller.router)
app.include_router(party_controller.router)
app.include_router(assignment_controller.router)
app.include_router(member_controller.router)
app.include_router(roster_controller.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.SERVICE_PORT, log_level="info")
