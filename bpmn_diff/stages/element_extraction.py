"""
Element Extraction Stage

Parses a BPMN 2.0 document and projects every identifiable element inside a
process container into a flat, ID-keyed table of ElementDescriptor values.

Supports:
- Literal attributes (qualified names) and local namespace declarations
- Shallow flattening of vendor extension elements ("camunda:assignee", ...)
- Incoming/outgoing sequence flow references from the BPMN namespace only,
  collected from every nested reference element (a sub-process includes the
  references of its inner nodes)
"""

import logging
import re
from typing import Dict, Optional, Union

from lxml import etree

from bpmn_diff.core.errors import InvalidDocumentError
from bpmn_diff.models.diff import ElementDescriptor

logger = logging.getLogger(__name__)

# BPMN 2.0 Namespaces
BPMN_NAMESPACE = "http://www.omg.org/spec/BPMN/20100524/MODEL"
BPMNDI_NAMESPACE = "http://www.omg.org/spec/BPMN/20100524/DI"
DC_NAMESPACE = "http://www.omg.org/spec/DD/20100524/DC"
DI_NAMESPACE = "http://www.omg.org/spec/DD/20100524/DI"
XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"

# Prefixes used when a document binds a well-known namespace to the default
# namespace or does not declare a prefix for it at all
KNOWN_PREFIXES = {
    BPMN_NAMESPACE: "bpmn",
    BPMNDI_NAMESPACE: "bpmndi",
    DC_NAMESPACE: "dc",
    DI_NAMESPACE: "di",
    XML_NAMESPACE: "xml",
    "http://www.w3.org/2001/XMLSchema-instance": "xsi",
    "http://camunda.org/schema/1.0/bpmn": "camunda",
    "http://camunda.org/schema/zeebe/1.0": "zeebe",
    "http://activiti.org/bpmn": "activiti",
    "http://flowable.org/bpmn": "flowable",
}

DIAGRAM_NAMESPACES = frozenset({BPMNDI_NAMESPACE, DC_NAMESPACE, DI_NAMESPACE})

FALLBACK_EXTENSION_PREFIX = "ext"

PROCESS_TAG = "process"
EXTENSION_ELEMENTS_TAG = "extensionElements"
INCOMING_TAG = f"{{{BPMN_NAMESPACE}}}incoming"
OUTGOING_TAG = f"{{{BPMN_NAMESPACE}}}outgoing"

_XML_DECLARATION = re.compile(r"^\s*<\?xml\s[^>]*\?>")


def parse_document(xml_text: Union[str, bytes], label: str = "document") -> etree._Element:
    """Parse raw BPMN XML into an lxml element tree.

    Args:
        xml_text: Raw XML text (str or bytes)
        label: Name used to identify the document in error messages

    Returns:
        Root element of the parsed document

    Raises:
        InvalidDocumentError: If the text is empty or not well-formed XML
    """
    if isinstance(xml_text, str):
        # lxml rejects str input carrying an encoding declaration
        xml_text = _XML_DECLARATION.sub("", xml_text.lstrip("\ufeff"), count=1)

    if xml_text is None or not xml_text.strip():
        raise InvalidDocumentError(label, "document is empty")

    parser = etree.XMLParser(resolve_entities=False, no_network=True)
    try:
        return etree.fromstring(xml_text, parser=parser)
    except etree.XMLSyntaxError as e:
        logger.debug(f"Failed to parse {label}: {e}")
        raise InvalidDocumentError(label, str(e)) from e


class ElementExtractor:
    """Builds the element table for one parsed BPMN document.

    Only elements that are descendants of a ``process`` container and carry a
    non-empty ``id`` are extracted. Elements outside processes, including the
    diagram interchange subtree, are never visited. A duplicated ID keeps the
    last occurrence in document order.
    """

    def __init__(self, extension_prefixes: Optional[Dict[str, str]] = None):
        """Initialize extractor.

        Args:
            extension_prefixes: Extra namespace URI -> prefix bindings used
                when an extension element has no prefix of its own
        """
        self.known_prefixes = dict(KNOWN_PREFIXES)
        if extension_prefixes:
            self.known_prefixes.update(extension_prefixes)

    def extract(self, document: Union[etree._Element, etree._ElementTree]) -> Dict[str, ElementDescriptor]:
        """Extract every identifiable process element.

        Args:
            document: Parsed document (root element or element tree)

        Returns:
            Mapping of element ID to ElementDescriptor, in document order
        """
        if isinstance(document, etree._ElementTree):
            document = document.getroot()

        elements: Dict[str, ElementDescriptor] = {}
        duplicates = 0

        for node in document.iter(tag=etree.Element):
            element_id = node.get("id")
            if not element_id or not self._inside_process(node):
                continue

            if element_id in elements:
                duplicates += 1
            elements[element_id] = self._describe(node, element_id)

        if duplicates:
            logger.warning(f"{duplicates} duplicate element ID(s) resolved by keeping the last occurrence")

        logger.debug(f"Extracted {len(elements)} elements")
        return elements

    def extract_text(self, xml_text: Union[str, bytes], label: str = "document") -> Dict[str, ElementDescriptor]:
        """Parse and extract in one step."""
        return self.extract(parse_document(xml_text, label))

    # ==================
    # Helper Methods
    # ==================

    def _describe(self, node: etree._Element, element_id: str) -> ElementDescriptor:
        properties: Dict[str, str] = {}

        for key, value in node.attrib.items():
            properties[self._qualified_name(node, key)] = value

        for key, uri in self._local_namespace_declarations(node).items():
            properties[key] = uri

        extension_elements = self._find_child(node, EXTENSION_ELEMENTS_TAG)
        if extension_elements is not None:
            properties.update(self._flatten_extensions(extension_elements))

        properties["incoming"] = ",".join(self._references(node, INCOMING_TAG))
        properties["outgoing"] = ",".join(self._references(node, OUTGOING_TAG))

        return ElementDescriptor(
            id=element_id,
            type=etree.QName(node).localname,
            name=node.get("name") or "",
            properties=properties,
        )

    def _flatten_extensions(self, extension_elements: etree._Element) -> Dict[str, str]:
        """Flatten each direct child into a single "<prefix>:<localName>" entry."""
        flattened: Dict[str, str] = {}

        for child in extension_elements.iterchildren(tag=etree.Element):
            qname = etree.QName(child)
            if qname.namespace in DIAGRAM_NAMESPACES:
                prefix = KNOWN_PREFIXES[qname.namespace]
            else:
                prefix = child.prefix or self._prefix_for(child, qname.namespace) or FALLBACK_EXTENSION_PREFIX

            text = str(child.xpath("string()"))
            flattened[f"{prefix}:{qname.localname}"] = text or child.get("class") or ""

        return flattened

    def _qualified_name(self, node: etree._Element, key: str) -> str:
        """Turn an lxml "{uri}local" attribute key into "prefix:local"."""
        if not key.startswith("{"):
            return key

        qname = etree.QName(key)
        if qname.namespace in DIAGRAM_NAMESPACES:
            # Layout keys get a fixed prefix whatever the document binds them to
            return f"{KNOWN_PREFIXES[qname.namespace]}:{qname.localname}"

        prefix = self._prefix_for(node, qname.namespace) or FALLBACK_EXTENSION_PREFIX
        return f"{prefix}:{qname.localname}"

    def _prefix_for(self, node: etree._Element, uri: Optional[str]) -> Optional[str]:
        if uri is None:
            return None
        for prefix, ns in node.nsmap.items():
            if prefix is not None and ns == uri:
                return prefix
        return self.known_prefixes.get(uri)

    @staticmethod
    def _local_namespace_declarations(node: etree._Element) -> Dict[str, str]:
        """Namespace declarations made on this element (not inherited)."""
        parent = node.getparent()
        inherited = parent.nsmap if parent is not None else {}

        declarations: Dict[str, str] = {}
        for prefix, uri in node.nsmap.items():
            if inherited.get(prefix) != uri:
                declarations["xmlns" if prefix is None else f"xmlns:{prefix}"] = uri
        return declarations

    @staticmethod
    def _references(node: etree._Element, tag: str) -> list:
        """Reference texts of every nested reference element, in document order."""
        refs = []
        for child in node.iterdescendants(tag=tag):
            text = str(child.xpath("string()"))
            if text:
                refs.append(text)
        return refs

    @staticmethod
    def _find_child(node: etree._Element, local_name: str) -> Optional[etree._Element]:
        for child in node.iterchildren(tag=etree.Element):
            if etree.QName(child).localname == local_name:
                return child
        return None

    @staticmethod
    def _inside_process(node: etree._Element) -> bool:
        return any(
            etree.QName(ancestor).localname == PROCESS_TAG
            for ancestor in node.iterancestors()
        )


def extract_elements(document: Union[etree._Element, etree._ElementTree]) -> Dict[str, ElementDescriptor]:
    """Extract the element table of a parsed document with default settings."""
    return ElementExtractor().extract(document)
