import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from supabase import Client

from emis_party import get_info
from emis_party.config import Settings, settings
from emis_party.core.dependencies import get_settings
from emis_party.core.exceptions import register_exception_handlers
from emis_party.database.supabase_client import get_supabase, ping
from emis_party.modules.parties import routes as parties_routes
from emis_party.modules.parties.models import TABLE as PARTIES_TABLE
from emis_party.modules.parties.schemas import PartyCreate
from emis_party.modules.permissions import routes as permissions_routes
from emis_party.modules.permissions.schemas import PermissionCreate
from emis_party.modules.roles import routes as roles_routes
from emis_party.modules.roles.schemas import RoleCreate

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application startup (api %s)", settings.api_prefix)
    yield
    logger.info("Application shutdown")


limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.rate_limit],
    enabled=settings.rate_limit_enabled,
)
app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    redirect_slashes=False,
    lifespan=lifespan,
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
register_exception_handlers(app)


class SecurityHeadersMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                message["headers"].extend([
                    (b"X-Content-Type-Options", b"nosniff"),
                    (b"X-Frame-Options", b"DENY"),
                    (b"X-XSS-Protection", b"1; mode=block"),
                ])
            await send(message)

        await self.app(scope, receive, send_with_headers)


app.add_middleware(SlowAPIMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include module routes
app.include_router(parties_routes.router, prefix=settings.api_prefix)
app.include_router(roles_routes.router, prefix=settings.api_prefix)
app.include_router(permissions_routes.router, prefix=settings.api_prefix)


def schema_definitions(settings: Settings) -> dict:
    """JSON schemas of the records, with allow-lists filled from settings"""
    definitions = {
        "Party": PartyCreate.model_json_schema(by_alias=True),
        "Role": RoleCreate.model_json_schema(by_alias=True),
        "Permission": PermissionCreate.model_json_schema(by_alias=True),
    }
    party = definitions["Party"]["properties"]
    party["type"] = {"type": "string", "enum": settings.get_party_types_list(), "default": settings.default_party_type}
    party["ownership"] = {"type": "string", "enum": settings.get_party_ownerships_list(), "default": settings.default_party_ownership}
    party["locale"] = {"type": "string", "enum": settings.get_locales_list(), "default": settings.default_locale}
    party["phases"] = {"type": "array", "items": {"type": "string", "enum": settings.get_disaster_phases_list()}}
    role = definitions["Role"]["properties"]
    role["type"] = {"type": "string", "enum": settings.get_role_types_list(), "default": settings.default_role_type}
    return definitions


@app.get("/")
@limiter.exempt
def root():
    return get_info()


@app.get(f"{settings.api_prefix}/schema")
def schema(current: Settings = Depends(get_settings)):
    return {"definitions": schema_definitions(current)}


@app.get("/health")
@limiter.exempt
async def health():
    return {"status": "healthy"}


@app.get("/ready")
@limiter.exempt
def ready(supabase: Client = Depends(get_supabase)):
    """Readiness probe: the parties table must answer"""
    if not ping(supabase, PARTIES_TABLE):
        return JSONResponse(status_code=503, content={"status": "unavailable"})
    return {"status": "ready"}
