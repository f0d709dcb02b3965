"""Conversion adapters from parsed forests to other XML libraries.

Each adapter turns the element roots of an XMLForest into elements of the
target library. Text children become the target's .text / .tail strings.
Text nodes kept as forest roots have no place in these models and are
reported as warnings.
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Type, Union

from simple_xml_parser.shared import get_logger
from simple_xml_parser.tree import ParseResult, XMLForest, XMLNode

MS_PER_SECOND = 1000


@dataclass
class AdapterMetadata:
    """Metadata about an integration adapter."""

    name: str
    target_library: str
    description: str


@dataclass
class ConversionResult:
    """Result of a conversion operation."""

    success: bool
    converted_data: List[Any]
    conversion_time_ms: float = 0.0
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


class IntegrationAdapter(ABC):
    """Base class for forest conversion adapters."""

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, self.metadata.name)

    @property
    @abstractmethod
    def metadata(self) -> AdapterMetadata:
        """Describe the adapter."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check whether the target library can be imported."""

    @abstractmethod
    def _element_factory(self) -> Any:
        """Return the target module providing Element and SubElement."""

    def to_target(self, source: Union[XMLForest, ParseResult]) -> ConversionResult:
        """Convert the element roots of a forest.

        Args:
            source: XMLForest, or a successful ParseResult

        Returns:
            ConversionResult with one target element per element root
        """
        start_time = time.time()
        if isinstance(source, ParseResult):
            if not source.success:
                return ConversionResult(
                    success=False,
                    converted_data=[],
                    errors=[f"Cannot convert failed parse: {source.error}"],
                )
            source = source.unwrap()

        if not self.is_available():
            return ConversionResult(
                success=False,
                converted_data=[],
                errors=[f"{self.metadata.target_library} is not installed"],
            )

        result = ConversionResult(success=True, converted_data=[])
        factory = self._element_factory()
        for root in source.roots:
            if root.is_text:
                result.warnings.append(
                    f"Top-level text node {root.id} has no equivalent and was skipped"
                )
                continue
            try:
                result.converted_data.append(self._convert(root, factory))
            except (TypeError, ValueError) as e:
                result.success = False
                result.errors.append(f"Cannot convert <{root.name}>: {e}")

        result.conversion_time_ms = (time.time() - start_time) * MS_PER_SECOND
        self.logger.debug(
            "Conversion completed",
            extra={
                "converted": len(result.converted_data),
                "errors": len(result.errors),
                "conversion_time_ms": result.conversion_time_ms,
            },
        )
        return result

    def _convert(self, root: XMLNode, factory: Any) -> Any:
        target_root = factory.Element(root.name, dict(root.attributes))
        stack = [(root, target_root)]
        while stack:
            node, target = stack.pop()
            last_element = None
            for child in node.children:
                if child.is_text:
                    if last_element is None:
                        target.text = (target.text or "") + child.text_content
                    else:
                        last_element.tail = (last_element.tail or "") + child.text_content
                    continue
                last_element = factory.SubElement(target, child.name, dict(child.attributes))
                stack.append((child, last_element))
        return target_root


class ElementTreeAdapter(IntegrationAdapter):
    """Adapter for the standard library xml.etree.ElementTree."""

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="elementtree",
            target_library="xml.etree.ElementTree",
            description="Convert forests to ElementTree elements",
        )

    def is_available(self) -> bool:
        return True

    def _element_factory(self) -> Any:
        import xml.etree.ElementTree as ET
        return ET


class LxmlAdapter(IntegrationAdapter):
    """Adapter for lxml.etree."""

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="lxml",
            target_library="lxml",
            description="Convert forests to lxml.etree elements",
        )

    def is_available(self) -> bool:
        try:
            import lxml.etree  # noqa: F401
        except ImportError:
            return False
        return True

    def _element_factory(self) -> Any:
        import lxml.etree
        return lxml.etree


_ADAPTERS: Dict[str, Type[IntegrationAdapter]] = {
    "elementtree": ElementTreeAdapter,
    "lxml": LxmlAdapter,
}


def get_adapter(name: str, correlation_id: Optional[str] = None) -> IntegrationAdapter:
    """Instantiate a registered adapter by name.

    Raises:
        KeyError: If no adapter has that name
    """
    try:
        adapter_class = _ADAPTERS[name]
    except KeyError:
        raise KeyError(
            f"Unknown adapter {name!r}; available: {', '.join(sorted(_ADAPTERS))}"
        ) from None
    return adapter_class(correlation_id)


def list_available_adapters() -> List[str]:
    """Names of adapters whose target library is installed."""
    return [name for name in sorted(_ADAPTERS) if _ADAPTERS[name]().is_available()]
