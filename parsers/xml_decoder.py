"""
Type-directed XML decoder

Maps an XML element onto a typed value using a statically declared
registry. Every target type is registered with one of four kinds:

PRIMITIVE
    The trimmed text content is parsed into the primitive. Empty text
    yields the registered empty value.
SCALAR
    A type constructible from one string. The trimmed text is passed to its
    constructor; empty text yields None and nothing is constructed.
COLLECTION
    Not decoded. The decoder returns NOT_POPULATED and leaves population to
    the caller, which owns the dedup and link logic.
COMPOSITE
    A fresh instance is built from the registered factory and every child
    element is decoded into the field whose declared name equals the
    child's tag. Fields without a child keep their defaults.
"""
import xml.etree.ElementTree as ET
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Tuple

from config.logging_config import get_logger
from utils.exceptions import DecodeError, SchemaDefinitionError, SchemaMismatchError

logger = get_logger(__name__)


class TypeKind(Enum):
    """Decode strategies"""
    PRIMITIVE = 'primitive'
    SCALAR = 'scalar'
    COLLECTION = 'collection'
    COMPOSITE = 'composite'


class _NotPopulated:
    def __repr__(self):
        return 'NOT_POPULATED'

    def __bool__(self):
        return False


NOT_POPULATED = _NotPopulated()


class CollectionOf(NamedTuple):
    """Target descriptor for a field holding a collection of item_type"""
    item_type: Any


class FieldSpec(NamedTuple):
    """Composite field: the attribute it is stored in and its target type"""
    attribute: str
    target: Any


class TypeSpec:
    """Registered decode strategy for one target type"""

    def __init__(self, kind: TypeKind, name: str,
                 constructor: Optional[Callable[..., Any]] = None,
                 empty: Any = None,
                 fields: Optional[Dict[str, FieldSpec]] = None):
        self.kind = kind
        self.name = name
        self.constructor = constructor
        self.empty = empty
        self.fields = fields or {}

    def __repr__(self):
        return f"<TypeSpec({self.kind.value}, '{self.name}')>"


def _type_name(target: Any) -> str:
    if isinstance(target, CollectionOf):
        return f"CollectionOf({_type_name(target.item_type)})"
    return getattr(target, '__name__', repr(target))


def parse_boolean(text: str) -> bool:
    """Parse 'true' (any case) as True and everything else as False"""
    return text.lower() == 'true'


class DecodeRegistry:
    """Mapping from target type to its decode strategy"""

    def __init__(self):
        self._specs: Dict[Any, TypeSpec] = {}

    def register_primitive(self, target: Any, parse: Callable[[str], Any], empty: Any = None) -> None:
        self._specs[target] = TypeSpec(TypeKind.PRIMITIVE, _type_name(target),
                                       constructor=parse, empty=empty)

    def register_scalar(self, target: Any, constructor: Optional[Callable[[str], Any]] = None) -> None:
        """
        Register a type built from a single string

        Args:
            target: Target type
            constructor: Single-argument constructor (defaults to the type itself)
        """
        if constructor is None:
            constructor = target
        if not callable(constructor):
            raise SchemaDefinitionError(f"{_type_name(target)} has no single-string constructor")
        self._specs[target] = TypeSpec(TypeKind.SCALAR, _type_name(target), constructor=constructor)

    def register_collection(self, target: CollectionOf) -> None:
        self._specs[target] = TypeSpec(TypeKind.COLLECTION, _type_name(target))

    def register_composite(self, target: Any, fields: Dict[str, Tuple[str, Any]],
                           factory: Optional[Callable[[], Any]] = None) -> None:
        """
        Register a composite type

        Args:
            target: Target type
            fields: Element tag -> (attribute name, field target type)
            factory: Zero-argument constructor (defaults to the type itself)
        """
        field_specs = {tag: FieldSpec(attribute, field_target)
                       for tag, (attribute, field_target) in fields.items()}
        self._specs[target] = TypeSpec(TypeKind.COMPOSITE, _type_name(target),
                                       constructor=factory or target, fields=field_specs)

    def spec_for(self, target: Any) -> TypeSpec:
        spec = self._specs.get(target)
        if spec is None:
            raise SchemaDefinitionError(f"No decoder registered for {_type_name(target)}")
        return spec

    def __contains__(self, target: Any) -> bool:
        return target in self._specs


def default_registry() -> DecodeRegistry:
    """Registry preloaded with the built-in primitive and scalar types"""
    registry = DecodeRegistry()
    registry.register_primitive(int, int)
    registry.register_primitive(float, float)
    registry.register_primitive(bool, parse_boolean)
    registry.register_scalar(str)
    registry.register_scalar(Decimal)
    registry.register_scalar(date, date.fromisoformat)
    return registry


def text_content(element: ET.Element) -> str:
    """Trimmed text of an element and all of its descendants"""
    return ''.join(element.itertext()).strip()


def get_child_element(element: ET.Element, tag: str) -> Optional[ET.Element]:
    """First direct child with the given tag, or None"""
    for child in element:
        if child.tag == tag:
            return child
    return None


def get_child_elements(element: ET.Element) -> List[ET.Element]:
    """Direct child elements in document order"""
    return list(element)


class XmlDecoder:
    """Decodes XML elements into registered target types"""

    def __init__(self, registry: DecodeRegistry):
        self.registry = registry

    def decode(self, target: Any, element: ET.Element) -> Any:
        """
        Decode an element into a value of the target type

        Args:
            target: Registered target type
            element: Element to decode

        Returns:
            Decoded value, None for empty leaves, or NOT_POPULATED for
            collection targets
        """
        spec = self.registry.spec_for(target)

        if spec.kind is TypeKind.PRIMITIVE:
            return self._decode_leaf(spec, element, spec.empty)
        if spec.kind is TypeKind.SCALAR:
            return self._decode_leaf(spec, element, None)
        if spec.kind is TypeKind.COLLECTION:
            return NOT_POPULATED
        return self._decode_composite(spec, element)

    def _decode_leaf(self, spec: TypeSpec, element: ET.Element, empty: Any) -> Any:
        text = text_content(element)
        if not text:
            return empty
        try:
            return spec.constructor(text)
        except (ValueError, TypeError, ArithmeticError) as e:
            raise DecodeError(f"Could not parse <{element.tag}> text '{text}' as {spec.name}: {e}") from e

    def _decode_composite(self, spec: TypeSpec, element: ET.Element) -> Any:
        try:
            result = spec.constructor()
        except TypeError as e:
            raise SchemaDefinitionError(f"{spec.name} cannot be constructed without arguments: {e}") from e

        for child in get_child_elements(element):
            field = spec.fields.get(child.tag)
            if field is None:
                raise SchemaMismatchError(spec.name, child.tag)

            value = self.decode(field.target, child)
            if value is NOT_POPULATED:
                logger.debug(f"Leaving {spec.name}.{field.attribute} for relational population")
                continue
            setattr(result, field.attribute, value)

        return result
