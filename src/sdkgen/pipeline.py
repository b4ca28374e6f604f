from __future__ import annotations

import json
import logging
from os import PathLike
from pathlib import Path

from .builder import build_ir, filter_ir
from .config import Config, TypeScriptClient
from .customer_config import ExtractedTypes, SourceRegistry, extract_types_from_config
from .generation.artifacts import ClientArtifacts, build_artifacts, to_json
from .ir import IRDocument
from .loader import load_spec
from .openapi import OpenAPIDocument
from .overrides import transform_spec_for_types

logger = logging.getLogger(__name__)

MANIFEST_FILE = "sdkgen-manifest.json"


def prepare_document(
    config: Config,
    types_config: str | PathLike[str] | None = None,
    registry: SourceRegistry | None = None,
) -> OpenAPIDocument:
    """Load the configured document and apply customer type overrides."""
    extracted = ExtractedTypes()
    if types_config is not None:
        extracted = extract_types_from_config(types_config, registry)
        logger.info("Extracted placeholder types from %s", types_config)
    document = load_spec(config.spec)
    if not extracted.is_empty():
        document = transform_spec_for_types(document, extracted)
    return document


def build_client(ir: IRDocument, client: TypeScriptClient) -> ClientArtifacts:
    filtered = filter_ir(ir, client.include_tags or (), client.exclude_tags or ())
    logger.info(
        "Client %s: %d of %d operations selected",
        client.name,
        len(filtered.operations),
        len(ir.operations),
    )
    return build_artifacts(filtered, client)


def run(
    config: Config,
    types_config: str | PathLike[str] | None = None,
    registry: SourceRegistry | None = None,
) -> list[ClientArtifacts]:
    """Run one generation pass for every configured client.

    Args:
        config: Validated configuration
        types_config: Optional customer configuration whose keys populate
            the placeholder schemas
        registry: Config formats to read ``types_config`` with; the
            built-in formats when omitted

    Returns:
        One artifact bundle per client, in configuration order
    """
    document = prepare_document(config, types_config, registry)
    ir = build_ir(document)
    return [build_client(ir, client) for client in config.clients]


def write_manifest(artifacts: ClientArtifacts, out_dir: str | PathLike[str]) -> Path:
    target = Path(out_dir)
    target.mkdir(parents=True, exist_ok=True)
    path = target / MANIFEST_FILE
    path.write_text(json.dumps(to_json([artifacts])[0], indent=2) + "\n", encoding="utf-8")
    return path
