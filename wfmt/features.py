"""
This module defines all wfmt features using a unified registry system.
The CLI and the HTTP API both dispatch through it.
"""

from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar
from dataclasses import dataclass
import logging

from wfmt.errors import WfmtError
from wfmt.literals import parse_arguments
from wfmt.printer import vsprintf
from wfmt.width import string_width, unicode_version

logger = logging.getLogger("wfmt.features")

T = TypeVar("T")


class OperationResult(Generic[T]):
    """Wrapper for operation results with success/error handling"""

    def __init__(
        self, success: bool, data: Optional[T] = None, error: Optional[str] = None
    ):
        self.success = success
        self.data = data
        self.error = error


@dataclass
class Feature:
    """A named operation exposed on the command line and over HTTP"""

    name: str
    description: str
    handler: Callable
    cli_options: Optional[Dict[str, Any]] = None
    api_endpoint: Optional[Dict[str, Any]] = None


class FeatureRegistry:
    """Registry for all wfmt features"""

    _features: Dict[str, Feature] = {}

    @classmethod
    def register(cls, feature: Feature) -> Feature:
        """Register a new feature"""
        cls._features[feature.name] = feature
        return feature

    @classmethod
    def get_feature(cls, name: str) -> Optional[Feature]:
        """Get a feature by name"""
        return cls._features.get(name)

    @classmethod
    def get_all_features(cls) -> Dict[str, Feature]:
        """Get all registered features"""
        return cls._features.copy()


# ----------------- Feature Handlers -----------------


def handle_version(**kwargs) -> OperationResult[Dict[str, str]]:
    """Handle version request"""
    from wfmt.version import get_version

    return OperationResult[Dict[str, str]](
        success=True, data={"version": get_version()}
    )


def handle_format(
    template: str, args: Optional[List[str]] = None, **kwargs
) -> OperationResult[Dict[str, Any]]:
    """Parse the argument literals and format them with the template"""
    try:
        values = parse_arguments(args or [])
    except WfmtError as e:
        logger.debug("rejected argument literal: %s", e)
        return OperationResult[Dict[str, Any]](success=False, error=str(e))

    output = vsprintf(template, values)
    logger.debug("formatted %r with %d arguments", template, len(values))
    return OperationResult[Dict[str, Any]](success=True, data={"output": output})


def handle_width(text: str, **kwargs) -> OperationResult[Dict[str, Any]]:
    """Measure the display width of a text"""
    return OperationResult[Dict[str, Any]](
        success=True,
        data={"width": string_width(text), "unicode_version": unicode_version()},
    )


# Register all features
version_feature = FeatureRegistry.register(
    Feature(
        name="version",
        description="Get the wfmt version",
        handler=handle_version,
        api_endpoint={
            "path": "/version",
            "methods": ["GET"],
            "response_model": Dict[str, str],
        },
    )
)

format_feature = FeatureRegistry.register(
    Feature(
        name="format",
        description="Format typed argument literals with a printf-style template",
        handler=handle_format,
        cli_options={
            "template": {
                "type": str,
                "required": True,
                "help": "Format template, e.g. '%-8s|%5.2f'",
            },
            "args": {
                "type": List[str],
                "required": False,
                "help": "Argument literals, e.g. 42 uint8(7) \"text\" 'x' (1+2i)",
            },
        },
        api_endpoint={
            "path": "/format",
            "methods": ["POST"],
            "request_model": {
                "template": (str, "The format template"),
                "args": (List[str], "Argument literals"),
            },
            "response_model": Dict[str, Any],
        },
    )
)

width_feature = FeatureRegistry.register(
    Feature(
        name="width",
        description="Measure the display width of a text in terminal columns",
        handler=handle_width,
        cli_options={
            "text": {"type": str, "required": True, "help": "Text to measure"},
        },
        api_endpoint={
            "path": "/width",
            "methods": ["POST"],
            "request_model": {"text": (str, "Text to measure")},
            "response_model": Dict[str, Any],
        },
    )
)
