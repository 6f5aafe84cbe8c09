"""Register generated resource files with their owning project."""

from __future__ import annotations

import codecs
import os
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Protocol

from loguru import logger

from .models import ContainerKind, ContainerNode


class RegistrationError(Exception):
    """Raised when a project file cannot be updated."""


class ProjectRegistrar(Protocol):
    def register(self, container: ContainerNode, path: Path) -> bool:
        """Attach ``path`` to ``container``; return ``True`` when something changed."""
        ...


class NullRegistrar:
    """Used when the host offers no way to register files."""

    def register(self, container: ContainerNode, path: Path) -> bool:
        return False


class ProjectFileRegistrar:
    """Add ``EmbeddedResource`` items to legacy MSBuild project files.

    SDK-style projects include resources by globbing, so they are left alone.
    Comments, the XML declaration and the existing indentation are kept.
    """

    def register(self, container: ContainerNode, path: Path) -> bool:
        project_file = container.path
        if container.kind != ContainerKind.REGULAR or not project_file.is_file():
            return False
        try:
            data = project_file.read_bytes()
            parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True))
            parser.feed(data)
            root = parser.close()
        except (ET.ParseError, OSError) as exc:
            raise RegistrationError(f"Unable to read {project_file.name}: {exc}") from exc

        if root.get("Sdk"):
            return False

        namespace = ""
        if root.tag.startswith("{"):
            namespace = root.tag[1:].split("}", 1)[0]
        qualify = (lambda tag: f"{{{namespace}}}{tag}") if namespace else (lambda tag: tag)

        include = os.path.relpath(path, project_file.parent).replace("/", "\\")
        resources = root.iter(qualify("EmbeddedResource"))
        if any(item.get("Include", "").lower() == include.lower() for item in resources):
            return False

        target_group = None
        for group in root.findall(qualify("ItemGroup")):
            if group.find(qualify("EmbeddedResource")) is not None:
                target_group = group
                break
        if target_group is None:
            target_group = ET.SubElement(root, qualify("ItemGroup"))
        _append_item(target_group, ET.Element(qualify("EmbeddedResource"), {"Include": include}))

        if namespace:
            ET.register_namespace("", namespace)
        try:
            project_file.write_bytes(_serialize(root, data))
        except (OSError, UnicodeDecodeError) as exc:
            raise RegistrationError(f"Unable to write {project_file.name}: {exc}") from exc
        logger.debug("Registered {} in {}", include, project_file.name)
        return True


def _append_item(group: ET.Element, element: ET.Element) -> None:
    """Append ``element`` indented like its siblings."""

    items = list(group)
    group.append(element)
    if not items:
        return
    element.tail = items[-1].tail
    items[-1].tail = items[-2].tail if len(items) > 1 else group.text


def _serialize(root: ET.Element, original: bytes) -> bytes:
    """Render ``root`` with the declaration, BOM and final newline of ``original``."""

    bom = codecs.BOM_UTF8 if original.startswith(codecs.BOM_UTF8) else b""
    text = original[len(bom):].decode("utf-8")
    declaration = ""
    if text.startswith("<?xml"):
        declaration = text[: text.index("?>") + 2] + "\n"
    body = ET.tostring(root, encoding="unicode")
    trailer = "\n" if text.endswith("\n") else ""
    return bom + f"{declaration}{body}{trailer}".encode("utf-8")


__all__ = [
    "RegistrationError",
    "ProjectRegistrar",
    "NullRegistrar",
    "ProjectFileRegistrar",
]
