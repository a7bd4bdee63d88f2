"""Importers turning external document sources into node trees."""

from .xml_importer import XmlDocumentImporter

__all__ = ["XmlDocumentImporter"]
