import xml.etree.ElementTree as ET


def local_name(element: ET.Element) -> str:
    """Strip the '{namespace}' prefix ElementTree puts on qualified tags."""
    return element.tag.rsplit("}", 1)[-1]


def namespace_uri(element: ET.Element) -> str:
    if element.tag.startswith("{"):
        return element.tag[1:].split("}", 1)[0]
    return ""


def element_text(element: ET.Element) -> str:
    """All character data under element, descendants included."""
    return "".join(element.itertext())
