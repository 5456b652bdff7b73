"""HTTP binding of SpecGate on top of FastAPI.

Key components:
- **main**: Application factory wiring settings, logging and the pipeline
- **routing**: One FastAPI route per described operation with a handler
- **middleware**: Correlation IDs and error translation
- **schemas**: The error response model
- **utils**: orjson-backed JSON responses

The request pipeline itself is framework-neutral (``src.request``); this
package only translates between Starlette requests/responses and it.
"""
