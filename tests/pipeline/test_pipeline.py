from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from sdkgen.config import parse_config
from sdkgen.errors import UnsupportedVersionError
from sdkgen.openapi import OpenAPIDocument
from sdkgen.pipeline import MANIFEST_FILE, prepare_document, run, write_manifest


def _config(spec: Path, **client: Any) -> Any:
    data = {"type": "typescript", "outDir": "out", "name": "api", "packageName": "api", **client}
    return parse_config({"spec": str(spec), "clients": [data]})


@pytest.fixture()
def spec_path(tmp_path: Path, workspace_document: OpenAPIDocument) -> Path:
    path = tmp_path / "openapi.json"
    path.write_text(json.dumps(workspace_document), encoding="utf-8")
    return path


class TestRun:
    def test_one_bundle_per_client(self, spec_path: Path) -> None:
        config = parse_config(
            {
                "spec": str(spec_path),
                "clients": [
                    {"type": "typescript", "outDir": "a", "name": "all", "packageName": "a"},
                    {"type": "typescript", "outDir": "b", "name": "users", "packageName": "b", "includeTags": ["users"]},
                ],
            }
        )
        everything, users = run(config)
        assert [service.tag for service in everything.services] == ["resources", "users"]
        assert [service.tag for service in users.services] == ["users"]
        assert [model.name for model in users.models] == ["User"]

    def test_customer_types_become_enums(self, tmp_path: Path, spec_path: Path) -> None:
        types_config = tmp_path / "project.py"
        types_config.write_text("config = {'resources': {'workspace': {}, 'project': {}}}\n", encoding="utf-8")
        (bundle,) = run(_config(spec_path), types_config)
        resource_type = next(model for model in bundle.models if model.name == "ResourceType")
        assert resource_type.type == '"workspace" | "project"'
        assert resource_type.validator == 'z.enum(["workspace", "project"])'

    def test_source_document_is_untouched(self, tmp_path: Path, spec_path: Path) -> None:
        types_config = tmp_path / "project.json"
        types_config.write_text(json.dumps({"resources": {"workspace": {}}}), encoding="utf-8")
        before = spec_path.read_text(encoding="utf-8")
        document = prepare_document(_config(spec_path), types_config)
        assert document["components"]["schemas"]["ResourceType"]["enum"] == ["workspace"]
        assert spec_path.read_text(encoding="utf-8") == before

    def test_unsupported_version(self, tmp_path: Path) -> None:
        path = tmp_path / "swagger.json"
        path.write_text(json.dumps({"swagger": "2.0", "paths": {}}), encoding="utf-8")
        with pytest.raises(UnsupportedVersionError):
            run(_config(path))


class TestWriteManifest:
    def test_writes_json(self, tmp_path: Path, spec_path: Path) -> None:
        (bundle,) = run(_config(spec_path, includeQueryKeys=True))
        path = write_manifest(bundle, tmp_path / "out" / "nested")
        assert path.name == MANIFEST_FILE
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["package_name"] == "api"
        assert data["services"][0]["operations"][0]["query_key_base"] == "'workspaces/resources'"
