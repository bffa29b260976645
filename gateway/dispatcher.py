from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional

from gateway.errors import GatewayError, ServiceNotConfigured, UnknownTool
from gateway.results import ToolResult
from gateway.services import ServiceRegistry
from gateway.tools.arguments import validate_arguments
from gateway.tools.registry import ToolRegistry, ToolSpec
from integrations.errors import BackendError

logger = logging.getLogger("arr_gateway.dispatcher")


class Dispatcher:
    """Routes a named tool call to its handler and turns every outcome into a ToolResult."""

    def __init__(self, services: ServiceRegistry, tools: ToolRegistry) -> None:
        self.services = services
        self.tools = tools

    def list_tools(self) -> List[ToolSpec]:
        return self.tools.advertised(self.services)

    def _resolve(self, name: str) -> ToolSpec:
        if name not in self.tools:
            raise UnknownTool(name)
        spec = self.tools.get(name)
        if spec.backend is not None and not self.services.is_configured(spec.backend):
            raise ServiceNotConfigured(spec.backend)
        return spec

    async def invoke(self, name: str, args: Optional[Dict[str, Any]] = None) -> ToolResult:
        t0 = time.monotonic()
        try:
            spec = self._resolve(name)
            cleaned = validate_arguments(spec.input_schema, args)
            out = await spec.fn(cleaned)
        except (GatewayError, BackendError) as e:
            logger.warning("tool %s failed: %s", name, e)
            return ToolResult.error(str(e))
        except Exception as e:
            logger.exception("tool %s raised unexpectedly", name)
            return ToolResult.error(f"{type(e).__name__}: {e}")

        duration_ms = int((time.monotonic() - t0) * 1000)
        logger.debug("tool %s ok in %d ms", name, duration_ms, extra={"tool": name, "duration_ms": duration_ms})
        if isinstance(out, ToolResult):
            return out
        return ToolResult.ok(out)
