"""Request boundary: every call returns a ToolResponse and never raises."""

from typing import Any, Dict, List, Optional, Set

from .config import GatewayConfig
from .errors import ErrorHandler
from .gateway import KEGGGateway
from .logging_config import LogTimer, get_logger
from .models import ToolResponse
from .resources import ResourceResolver
from .router import OPERATIONS, KEGGRouter

logger = get_logger('service')


class KEGGService:
    """Tool catalogue and resource reads over the KEGG REST API."""

    def __init__(self, config: Optional[GatewayConfig] = None, gateway: Optional[KEGGGateway] = None):
        """
        Args:
            config: Connection settings; ignored when ``gateway`` is given
            gateway: Pre-built gateway, mainly for tests
        """
        self.config = config or GatewayConfig()
        self.gateway = gateway or KEGGGateway(self.config)
        self.error_handler = ErrorHandler()
        self.router = KEGGRouter(self.gateway, self.error_handler)
        self.resolver = ResourceResolver(self.gateway)

    def list_tools(self) -> List[Dict[str, Any]]:
        return [descriptor.catalogue_entry() for descriptor in OPERATIONS.values()]

    def list_resource_templates(self) -> List[Dict[str, str]]:
        return self.resolver.templates()

    def text_arguments(self, name: str) -> Set[str]:
        """String-typed argument names of operation ``name``; empty if unknown."""
        descriptor = OPERATIONS.get(name)
        return descriptor.schema.text_arguments() if descriptor else set()

    def call_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> ToolResponse:
        """Execute operation ``name``; failures come back as error payloads."""
        try:
            with LogTimer(f"tool {name}", logger):
                result = self.router.execute(name, arguments)
        except Exception as e:  # Boundary: nothing escapes to the host
            context = self.error_handler.handle_error(e, name)
            payload = context.to_payload()
            payload['error'] = f"Error executing tool {name}: {context.message}"
            return ToolResponse(payload=payload, is_error=True)

        return ToolResponse(payload=result)

    def read_resource(self, uri: str) -> ToolResponse:
        """Resolve a ``kegg://`` URI; failures come back as error payloads."""
        try:
            with LogTimer(f"resource {uri}", logger):
                contents = self.resolver.resolve(uri)
        except Exception as e:  # Boundary: nothing escapes to the host
            context = self.error_handler.handle_error(e, 'read_resource')
            payload = context.to_payload()
            payload['uri'] = uri
            return ToolResponse(payload=payload, is_error=True)

        return ToolResponse(payload=contents.data, mime_type=contents.mime_type)
