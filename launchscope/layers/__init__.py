"""Layers package initialization."""
from launchscope.layers.repair import repair_json
from launchscope.layers.locator import EmbeddedStateLocator
from launchscope.layers.resolver import FieldResolver
from launchscope.layers.enrichment import DetailEnricher, DetailContext
from launchscope.layers.assets import AssetNormalizer, ImgixFit, ImgixOptions, process_image_url
from launchscope.layers.metadata import OpenGraphScraper, extract_open_graph
from launchscope.layers.operations import ProductHuntScraper

__all__ = [
    "repair_json",
    "EmbeddedStateLocator",
    "FieldResolver",
    "DetailEnricher",
    "DetailContext",
    "AssetNormalizer",
    "ImgixFit",
    "ImgixOptions",
    "process_image_url",
    "OpenGraphScraper",
    "extract_open_graph",
    "ProductHuntScraper",
]
