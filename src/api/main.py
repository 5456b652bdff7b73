"""FastAPI application factory.

Wires settings, logging, the description repository, the request pipeline
and the operation router into one application. Described operations are
routed at construction time from ``document_config.documents``; more
documents can be routed later through ``app.state.router``.

Middleware are executed in reverse order of registration.
"""

from collections.abc import AsyncGenerator, Mapping
from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from src.api.constants import HEALTH_PATH
from src.api.middleware.error_handler import register_exception_handlers
from src.api.middleware.request_context import RequestContextMiddleware
from src.api.routing import OperationHandler, OperationRouter, load_handlers
from src.api.utils.responses import ORJSONResponse
from src.core.config import Settings, get_settings
from src.core.logging import setup_logging
from src.descriptions.references import ParameterRefBuilder
from src.infrastructure.repository import DescriptionRepository
from src.request.assembler import RequestParameterAssembler
from src.request.hydration import DateTimeSerializer, ObjectHydrator
from src.request.processor import RequestProcessor
from src.request.validation import SchemaValidator


@asynccontextmanager
async def lifespan(app_instance: FastAPI) -> AsyncGenerator[None]:
    """Log application startup and shutdown.

    Args:
        app_instance: The FastAPI application instance.

    Yields:
        None: Nothing is yielded, this is just a lifespan context.
    """
    logger.info(
        "Application startup complete - {} v{}",
        app_instance.title,
        app_instance.version,
    )
    yield
    logger.info("Application shutdown complete")


def create_processor(
    settings: Settings, repository: DescriptionRepository
) -> RequestProcessor:
    """Build the request processor with the default collaborators.

    Args:
        settings: Application settings.
        repository: The description repository requests are bound against.

    Returns:
        RequestProcessor: The configured processor.
    """
    date_time_serializer = DateTimeSerializer()
    hydrator = (
        ObjectHydrator(date_time_serializer)
        if settings.request_config.hydrate_bodies
        else None
    )
    public = settings.document_config.public
    return RequestProcessor(
        repository=repository,
        validator=SchemaValidator(),
        assembler=RequestParameterAssembler(),
        hydrator=hydrator,
        date_time_serializer=date_time_serializer,
        parameter_ref_builder=ParameterRefBuilder(
            public.base_url, public.scheme, public.host
        ),
    )


def create_app(
    settings: Settings | None = None,
    handlers: Mapping[str, OperationHandler] | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings instance. If not provided, will use get_settings().
        handlers: Operation id to handler, applied to every configured document.
            Loaded from ``document_config.handlers`` when omitted.

    Returns:
        FastAPI: Configured FastAPI application instance.

    Raises:
        DocumentNotFoundError: If a configured document does not exist.
        InvalidDescriptionError: If a configured document cannot be loaded.
    """
    if settings is None:
        settings = get_settings()

    # Setup logging first
    setup_logging(settings)

    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        docs_url=settings.docs_url,
        redoc_url=settings.redoc_url,
        openapi_url=settings.openapi_url,
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )

    if settings.request_config.error_strategy == "handle":
        register_exception_handlers(application)
    else:
        logger.info("Error strategy is fallthrough, exception handlers not registered")

    application.add_middleware(RequestContextMiddleware)

    repository = DescriptionRepository(
        settings.document_config.base_path,
        cache_enabled=settings.document_config.cache_enabled,
    )
    processor = create_processor(settings, repository)
    router = OperationRouter(repository, processor)

    application.state.repository = repository
    application.state.processor = processor
    application.state.router = router

    @application.get(HEALTH_PATH)
    async def health() -> dict[str, object]:
        """Health check endpoint for monitoring and container orchestration.

        Returns:
            dict[str, object]: Status and the routed description identifiers.
        """
        return {
            "status": "healthy",
            "documents": list(settings.document_config.documents),
        }

    if handlers is None and settings.document_config.handlers:
        handlers = load_handlers(settings.document_config.handlers)

    for uri in settings.document_config.documents:
        router.register(application, uri, handlers or {})

    return application
