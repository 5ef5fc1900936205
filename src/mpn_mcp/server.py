"""MPN MCP Server - Classify manufacturer part numbers and check official replacements."""

import json
import logging
import time
from contextlib import asynccontextmanager
from typing import Any

from fastmcp import FastMCP
from mcp.types import ToolAnnotations
from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse
from starlette.routing import Route

from . import __version__
from .categories import ComponentCategory, parse_category
from .config import HTTP_PORT, LOG_LEVEL, MAX_BATCH_SIZE, RATE_LIMIT_REQUESTS
from .providers import get_provider
from .resolver import Resolver, default_resolver

logger = logging.getLogger(__name__)

# Global state
_resolver: Resolver | None = None


@asynccontextmanager
async def lifespan(app):
    """Build the pattern store on startup (not on first request)."""
    global _resolver
    _resolver = default_resolver()
    logger.info(
        f"Resolver ready: {len(_resolver.providers)} providers, {len(_resolver.store)} rules"
    )
    yield


# Create MCP server
mcp = FastMCP(
    name="mpnmcp",
    instructions="Manufacturer part number (MPN) classification. No auth required. Use classify_part to find the component category, manufacturer, series and package of an MPN, classify_parts for BOM-sized batches, check_replacement to ask whether one MPN is an official drop-in replacement for another, and compare_parts for a graded similarity score. list_categories and list_providers show what is recognized.",
    lifespan=lifespan,
)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Rate limiting middleware - 100 requests/minute per IP.

    Includes protections against memory exhaustion from IP spoofing:
    - Maximum tracked IPs limit (10,000)
    - Periodic cleanup of stale IPs
    """

    MAX_TRACKED_IPS = 10_000  # Prevent memory exhaustion from spoofed IPs

    def __init__(self, app, requests_per_minute: int = RATE_LIMIT_REQUESTS):
        super().__init__(app)
        self.requests_per_minute = requests_per_minute
        self.request_counts: dict[str, list[float]] = {}
        self._last_cleanup = time.time()

    def _get_client_ip(self, request) -> str:
        """Extract client IP, preferring rightmost X-Forwarded-For entry."""
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            # Use rightmost IP (set by our reverse proxy, harder to spoof)
            ips = [ip.strip() for ip in forwarded.split(",")]
            return ips[-1] if ips else "unknown"
        return request.client.host if request.client else "unknown"

    def _cleanup_stale_ips(self, now: float) -> None:
        window_start = now - 60
        stale_ips = [
            ip for ip, timestamps in self.request_counts.items()
            if not timestamps or timestamps[-1] < window_start
        ]
        for ip in stale_ips:
            del self.request_counts[ip]

    def _check_rate_limit(self, client_ip: str) -> bool:
        now = time.time()
        window_start = now - 60

        if now - self._last_cleanup > 60:
            self._cleanup_stale_ips(now)
            self._last_cleanup = now

        if len(self.request_counts) >= self.MAX_TRACKED_IPS:
            self._cleanup_stale_ips(now)
            # Still at limit after cleanup: reject rather than grow
            if len(self.request_counts) >= self.MAX_TRACKED_IPS:
                return True

        if client_ip not in self.request_counts:
            self.request_counts[client_ip] = [now]
            return False

        self.request_counts[client_ip] = [
            t for t in self.request_counts[client_ip] if t > window_start
        ]

        if len(self.request_counts[client_ip]) >= self.requests_per_minute:
            return True

        self.request_counts[client_ip].append(now)
        return False

    async def dispatch(self, request, call_next):
        if request.url.path == "/health":
            return await call_next(request)

        client_ip = self._get_client_ip(request)
        if self._check_rate_limit(client_ip):
            return JSONResponse(
                status_code=429,
                content={"error": "Rate limit exceeded", "retry_after": 60},
                headers={"Retry-After": "60"},
            )
        return await call_next(request)


def _get_resolver() -> Resolver:
    return _resolver if _resolver is not None else default_resolver()


# Helpers to handle JSON string arrays from MCP clients
def _parse_list_param(value: list[str] | str | None) -> list[str] | None:
    """Parse a list parameter that may come as a JSON string from some MCP clients.

    Some MCP clients serialize list parameters as JSON strings like
    '["a", "b"]' instead of actual arrays. This handles both cases.
    """
    if value is None:
        return None
    if isinstance(value, list):
        return value
    if isinstance(value, str):
        try:
            parsed = json.loads(value)
            if isinstance(parsed, list):
                return parsed
        except json.JSONDecodeError:
            logger.debug(f"Failed to parse list parameter as JSON: {value[:100]!r}")
    return None


def _resolve_category(name: str | None) -> tuple[ComponentCategory | None, dict | None]:
    """Category for a tool argument, or an error dict for unknown names."""
    if not name:
        return None, None
    category = parse_category(name)
    if category is None:
        return None, {
            "error": f"Category not found: '{name}'",
            "hint": "Use list_categories() to see available categories",
        }
    return category, None


def _classify(mpn: str, category: str | None = None) -> dict[str, Any]:
    if not mpn or not mpn.strip():
        return {"error": "mpn is required"}
    resolved, error = _resolve_category(category)
    if error:
        return error
    return _get_resolver().classify(mpn, resolved).to_dict()


def _classify_many(mpns: list[str] | str | None, category: str | None = None) -> dict[str, Any]:
    parsed = _parse_list_param(mpns)
    if parsed is None and isinstance(mpns, str):
        # Plain string: one MPN per line or comma
        parsed = [part for part in mpns.replace("\n", ",").split(",") if part.strip()]
    if not parsed:
        return {"error": "mpns must be a non-empty list of part numbers"}
    if len(parsed) > MAX_BATCH_SIZE:
        return {"error": f"Too many part numbers (max {MAX_BATCH_SIZE} per call)"}
    resolved, error = _resolve_category(category)
    if error:
        return error

    resolver = _get_resolver()
    results = [resolver.classify(mpn if isinstance(mpn, str) else None, resolved).to_dict() for mpn in parsed]
    return {
        "results": results,
        "total": len(results),
        "matched": sum(1 for r in results if r["matched"]),
    }


def _check_replacement(candidate: str, original: str, manufacturer: str | None = None) -> dict[str, Any]:
    if not candidate or not original:
        return {"error": "Both candidate and original part numbers are required"}

    resolver = _get_resolver()
    provider_id = None
    if manufacturer:
        provider = get_provider(manufacturer)
        if provider is None or resolver.provider(provider.provider_id) is None:
            return {
                "error": f"Manufacturer not supported: '{manufacturer}'",
                "hint": "Use list_providers() to see supported manufacturers",
            }
        provider_id = provider.provider_id
    else:
        classified = resolver.classify(original)
        provider_id = classified.provider_id or None

    compatible = bool(provider_id) and resolver.is_official_replacement(candidate, original, provider_id)
    return {
        "candidate": candidate.strip().upper(),
        "original": original.strip().upper(),
        "provider": provider_id,
        "compatible": compatible,
    }


def _compare(first: str, second: str) -> dict[str, Any]:
    if not first or not second:
        return {"error": "Both part numbers are required"}
    resolver = _get_resolver()
    a = resolver.classify(first)
    b = resolver.classify(second)
    return {
        "first": a.to_dict(),
        "second": b.to_dict(),
        "similarity": resolver.similarity(first, second),
        "same_provider": a.matched and a.provider_id == b.provider_id,
    }


def _list_providers() -> dict[str, Any]:
    providers = [provider.description() for provider in _get_resolver().providers]
    return {"providers": providers, "total": len(providers)}


def _list_categories() -> dict[str, Any]:
    categories = [
        {
            "name": category.name,
            "base": category.base.name,
            "qualified": category.is_qualified,
            "manufacturer": category.manufacturer or None,
        }
        for category in ComponentCategory
    ]
    return {"categories": categories, "total": len(categories)}


# Tools

@mcp.tool(
    annotations=ToolAnnotations(
        title="Classify Part Number",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    )
)
async def classify_part(mpn: str, category: str | None = None) -> dict:
    """Identify the component category, manufacturer, series and package of an MPN.

    Args:
        mpn: Manufacturer part number (e.g., "LM358DR", "STM32F103C8T6", "504182-0210")
        category: Optional category to restrict matching to (e.g., "OPAMP", "CONNECTOR").
                  A generic category only matches rules registered for that exact category.

    Returns:
        matched: Whether any provider recognized the MPN
        category, base_category: Matched category and its generic base
        provider: Provider id (e.g., "ti", "amphenol")
        series, package_code: Extracted series and package ("" when unknown)
        attributes: Extra decoded attributes (pin_count, flash_size_kb, density, temperature_grade)
    """
    if mpn and len(mpn) > 500:
        return {"error": "Part number too long (max 500 characters)"}
    return _classify(mpn, category)


@mcp.tool(
    annotations=ToolAnnotations(
        title="Classify Part Numbers (Batch)",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    )
)
async def classify_parts(mpns: list[str] | str, category: str | None = None) -> dict:
    """Classify a list of MPNs, e.g. the part column of a BOM.

    Args:
        mpns: List of part numbers (max 50). A comma separated string also works.
        category: Optional category applied to every MPN

    Returns:
        results: One classify_part result per input, in input order
        total: Number of inputs
        matched: Number of inputs that were recognized
    """
    return _classify_many(mpns, category)


@mcp.tool(
    annotations=ToolAnnotations(
        title="Check Official Replacement",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    )
)
async def check_replacement(candidate: str, original: str, manufacturer: str | None = None) -> dict:
    """Check whether `candidate` is an official drop-in replacement for `original`.

    Not symmetric: a 1N4007 (1000V) replaces a 1N4001 (50V) but not the reverse.
    Different component kinds are never compatible, even from one manufacturer.

    Args:
        candidate: The part you want to fit (e.g., "1N4007")
        original: The part the design calls for (e.g., "1N4001")
        manufacturer: Optional manufacturer name or alias (e.g., "TI", "Vishay").
                      Defaults to the manufacturer that classifies `original`.

    Returns:
        compatible: True if the manufacturer lists `candidate` as a replacement
        provider: Provider id that answered (None if `original` is not recognized)
    """
    if len(candidate or "") > 500 or len(original or "") > 500:
        return {"error": "Part number too long (max 500 characters)"}
    return _check_replacement(candidate, original, manufacturer)


@mcp.tool(
    annotations=ToolAnnotations(
        title="Compare Part Numbers",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    )
)
async def compare_parts(first: str, second: str) -> dict:
    """Score how alike two MPNs are, for ranking possible substitutes.

    Unlike check_replacement this is symmetric and graded rather than yes/no.

    Args:
        first: A part number (e.g., "LM358N")
        second: Another part number (e.g., "LM2904D")

    Returns:
        similarity: 0.0 (unrelated) to 1.0 (same part). Same manufacturer adds 0.3,
                    same component family 0.4, same or equivalent series 0.2, and
                    agreeing package/spec values up to 0.1. Different manufacturers
                    score at most 0.4.
        first, second: classify_part result for each input
        same_provider: Whether one manufacturer recognized both
    """
    if len(first or "") > 500 or len(second or "") > 500:
        return {"error": "Part number too long (max 500 characters)"}
    return _compare(first, second)


@mcp.tool(
    annotations=ToolAnnotations(
        title="List Manufacturers",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    )
)
async def list_providers() -> dict:
    """List supported manufacturers with their categories and rule counts."""
    return _list_providers()


@mcp.tool(
    annotations=ToolAnnotations(
        title="List Categories",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    )
)
async def list_categories() -> dict:
    """List component categories. Qualified categories name a manufacturer and their generic base."""
    return _list_categories()


# Health check endpoint
async def health(request):
    return JSONResponse({
        "status": "healthy",
        "service": "mpn-mcp",
        "version": __version__,
    })


# Create ASGI app
def create_app():
    """Create the ASGI application."""
    middleware = [
        Middleware(RateLimitMiddleware, requests_per_minute=RATE_LIMIT_REQUESTS),
    ]

    # stateless_http=True required because some MCP clients don't forward session cookies
    app = mcp.http_app(
        path="/mcp",
        middleware=middleware,
        transport="streamable-http",
        stateless_http=True,
    )

    app.routes.append(Route("/health", health))

    return app


app = create_app()


class _HealthFilterLog(logging.Filter):
    """Suppress noisy /health access logs from Docker healthchecks."""

    def filter(self, record: logging.LogRecord) -> bool:
        msg = record.getMessage()
        return "/health" not in msg


def main():
    """Run the server."""
    import uvicorn

    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("uvicorn.access").addFilter(_HealthFilterLog())

    uvicorn.run(
        "mpn_mcp.server:app",
        host="0.0.0.0",
        port=HTTP_PORT,
        lifespan="on",
    )


if __name__ == "__main__":
    main()
