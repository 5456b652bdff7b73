"""Routing of described operations to application handlers.

``OperationRouter.register`` reads a description and adds one FastAPI route
per operation whose ``operationId`` has a handler. Each route runs the
request through the ``RequestProcessor`` before the handler sees it, so a
handler only ever receives requests with valid, typed parameters.

Handlers take the processed ``ApiRequest`` and may be sync or async::

    def get_pet(request: ApiRequest) -> dict[str, Any]:
        return {"id": request.get("petId")}

    router.register(app, "petstore.yml", {"getPetById": get_pet})
"""

import importlib
import inspect
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from fastapi import FastAPI
from loguru import logger
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import Response

from src.api.utils.responses import ORJSONResponse
from src.core.context import RequestContext
from src.descriptions.model import Operation
from src.request.interfaces import DescriptionRepositoryProtocol
from src.request.message import ApiRequest, RequestMeta
from src.request.processor import RequestProcessor

type OperationHandler = Callable[[ApiRequest], Any]
type Endpoint = Callable[[Request], Awaitable[Response]]


async def build_api_request(request: Request, uri: str, template: str) -> ApiRequest:
    """Translate a Starlette request into an ``ApiRequest``.

    Repeated query keys become lists; path parameters and the routing facts
    are placed in the attributes.

    Args:
        request: The incoming Starlette request.
        uri: Identifier of the description the route was built from.
        template: The described path template the route matched.

    Returns:
        ApiRequest: The framework-neutral request.
    """
    query: dict[str, Any] = {}
    for key in request.query_params:
        values = request.query_params.getlist(key)
        query[key] = values[0] if len(values) == 1 else values

    attributes: dict[str, Any] = dict(request.path_params)
    attributes[RequestMeta.ATTRIBUTE_URI] = uri
    attributes[RequestMeta.ATTRIBUTE_PATH] = template

    return ApiRequest(
        method=request.method,
        query=query,
        headers=dict(request.headers.items()),
        content=await request.body(),
        attributes=attributes,
    )


def render_result(result: Any) -> Response:  # noqa: ANN401
    """Pass responses through and render anything else as JSON."""
    if isinstance(result, Response):
        return result
    return ORJSONResponse(content=result)


class OperationRouter:
    """Adds described operations to a FastAPI application.

    Args:
        repository: Source of the descriptions to route.
        processor: Processes every routed request before its handler runs.
    """

    def __init__(
        self, repository: DescriptionRepositoryProtocol, processor: RequestProcessor
    ) -> None:
        self.repository = repository
        self.processor = processor

    def register(
        self, app: FastAPI, uri: str, handlers: Mapping[str, OperationHandler]
    ) -> list[Operation]:
        """Route every operation of a description that has a handler.

        Args:
            app: The application to add routes to.
            uri: Identifier of the description.
            handlers: Operation id to handler.

        Returns:
            list[Operation]: The operations that were routed.

        Raises:
            DocumentNotFoundError: If the description does not exist.
            InvalidDescriptionError: If the description cannot be loaded.
        """
        description = self.repository.get(uri)
        routed: list[Operation] = []

        for operation in description.operations:
            handler = handlers.get(operation.operation_id)
            if handler is None:
                logger.debug("No handler for operation {}", operation.operation_id)
                continue

            app.add_api_route(
                operation.path,
                self._endpoint(uri, operation, handler),
                methods=[operation.method.upper()],
                name=operation.operation_id,
                summary=operation.summary or None,
                include_in_schema=False,
            )
            routed.append(operation)

        logger.info("Routed {} operations from {}", len(routed), uri)
        return routed

    def _endpoint(
        self, uri: str, operation: Operation, handler: OperationHandler
    ) -> Endpoint:
        processor = self.processor

        async def endpoint(request: Request) -> Response:
            api_request = await build_api_request(request, uri, operation.path)
            # set here: the processor runs on a copy of this context
            RequestContext.set_operation_id(operation.operation_id)

            with logger.contextualize(operation_id=operation.operation_id):
                # a description cache miss reads and parses the document
                await run_in_threadpool(processor.process_or_raise, api_request)

                if inspect.iscoroutinefunction(handler):
                    result = await handler(api_request)
                else:
                    result = await run_in_threadpool(handler, api_request)

            return render_result(result)

        endpoint.__name__ = operation.operation_id
        return endpoint


def load_handlers(import_path: str) -> Mapping[str, OperationHandler]:
    """Import a handler mapping from a ``module:attribute`` path.

    Args:
        import_path: e.g. ``petstore.handlers:HANDLERS``.

    Returns:
        Mapping[str, OperationHandler]: Operation id to handler.

    Raises:
        ValueError: If the path is malformed or does not name a mapping.
        ImportError: If the module cannot be imported.
    """
    module_name, _, attribute = import_path.partition(":")
    if not module_name or not attribute:
        msg = f"Handler path '{import_path}' must have the form 'module:attribute'"
        raise ValueError(msg)

    handlers = getattr(importlib.import_module(module_name), attribute, None)
    if not isinstance(handlers, Mapping):
        msg = f"Handler path '{import_path}' does not name a mapping"
        raise ValueError(msg)
    return handlers
