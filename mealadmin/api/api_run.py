from pathlib import Path
from typing import Dict, Optional
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from mealadmin.domain.Resource_Type import RESOURCE_TYPES, WEEK, UnknownField, UnknownResourceType
from mealadmin.events.Event_Bus import EventBus
from mealadmin.events.activity_log import ActivityLog
from mealadmin.infra.exceptions import DuplicateIdentifier, RecordNotFound, StoreError, StoreUnavailable
from mealadmin.infra.Record_Store import RecordStore, build_store
from mealadmin.logic.resources.service import ResourceService
from mealadmin.utilities.constants import WEEKLY_MENUS_ID_FIELD, WEEKLY_MENUS_TABLE

# Routers
from mealadmin.api.routes import activity, resources

# Logging
logger = logging.getLogger("mealadmin_app")


def build_services(bus: EventBus, backend: Optional[str] = None,
                   data_dir: Optional[Path] = None) -> Dict[str, ResourceService]:
    """One ResourceService per resource type, all publishing on the same bus."""
    menu_store: RecordStore = build_store(WEEKLY_MENUS_TABLE, WEEKLY_MENUS_ID_FIELD, backend=backend, data_dir=data_dir)
    services = {}
    for key, rt in RESOURCE_TYPES.items():
        store = build_store(rt.table, rt.id_field, backend=backend, data_dir=data_dir)
        services[key] = ResourceService(rt, store, event_bus=bus,
                                        menu_store=menu_store if rt is WEEK else None)
    return services


def _error(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": str(exc)})


def create_app(backend: Optional[str] = None, data_dir: Optional[Path] = None,
               services: Optional[Dict[str, ResourceService]] = None) -> FastAPI:
    app = FastAPI(title="Meal Service Admin Console API")

    bus = EventBus()
    app.state.activity = ActivityLog().attach(bus)
    if services is None:
        services = build_services(bus, backend=backend, data_dir=data_dir)
    else:
        for service in services.values():
            service.event_bus = bus
    app.state.services = services

    app.include_router(activity.router)
    app.include_router(resources.router)

    @app.exception_handler(RecordNotFound)
    async def _not_found(request: Request, exc: RecordNotFound):
        return _error(404, exc)

    @app.exception_handler(DuplicateIdentifier)
    async def _duplicate(request: Request, exc: DuplicateIdentifier):
        return _error(409, exc)

    @app.exception_handler(StoreUnavailable)
    async def _unavailable(request: Request, exc: StoreUnavailable):
        logger.error(f"Store unavailable on {request.url.path}: {exc}")
        return _error(503, exc)

    @app.exception_handler(StoreError)
    async def _store_error(request: Request, exc: StoreError):
        logger.error(f"Store error on {request.url.path}: {exc}")
        return _error(502, exc)

    @app.exception_handler(UnknownField)
    async def _unknown_field(request: Request, exc: UnknownField):
        return _error(400, exc)

    @app.exception_handler(UnknownResourceType)
    async def _unknown_resource(request: Request, exc: UnknownResourceType):
        return _error(404, exc)

    return app


app = create_app()
