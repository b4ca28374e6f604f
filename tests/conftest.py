from __future__ import annotations

from typing import cast

import pytest

from sdkgen.openapi import OpenAPIDocument


@pytest.fixture()
def minimal_openapi_document() -> dict[str, object]:
    return {
        "openapi": "3.0.3",
        "info": {"title": "Example", "version": "1.0.0"},
        "paths": {},
    }


@pytest.fixture()
def workspace_document() -> OpenAPIDocument:
    """A 3.0 document with path, query and body parameters and placeholder types."""
    return cast(
        OpenAPIDocument,
        {
            "openapi": "3.0.3",
            "info": {"title": "Workspaces", "version": "1.0.0"},
            "paths": {
                "/workspaces/{workspaceId}/resources/{resourceId}": {
                    "parameters": [
                        {"name": "resourceId", "in": "path", "required": True, "schema": {"type": "string"}},
                    ],
                    "get": {
                        "operationId": "ResourcesController_findOne",
                        "tags": ["resources"],
                        "parameters": [
                            {"name": "workspaceId", "in": "path", "required": True, "schema": {"type": "string"}},
                            {"name": "expand", "in": "query", "schema": {"type": "boolean"}},
                        ],
                        "responses": {
                            "200": {
                                "description": "ok",
                                "content": {"application/json": {"schema": {"$ref": "#/components/schemas/Resource"}}},
                            }
                        },
                    },
                    "patch": {
                        "operationId": "ResourcesController_update",
                        "tags": ["resources"],
                        "parameters": [
                            {"name": "workspaceId", "in": "path", "required": True, "schema": {"type": "string"}},
                        ],
                        "requestBody": {
                            "content": {
                                "application/json": {
                                    "schema": {
                                        "type": "object",
                                        "properties": {"name": {"type": "string"}},
                                    }
                                }
                            }
                        },
                        "responses": {"204": {"description": "updated"}},
                    },
                },
                "/users": {
                    "get": {
                        "tags": ["users"],
                        "responses": {
                            "200": {
                                "description": "ok",
                                "content": {
                                    "application/json": {
                                        "schema": {"type": "array", "items": {"$ref": "#/components/schemas/User"}}
                                    }
                                },
                            }
                        },
                    }
                },
            },
            "components": {
                "schemas": {
                    "Resource": {
                        "type": "object",
                        "required": ["id", "type"],
                        "properties": {
                            "id": {"type": "string"},
                            "type": {"$ref": "#/components/schemas/ResourceType"},
                            "parentId": {"type": "string", "nullable": True},
                        },
                    },
                    "ResourceType": {"type": "string"},
                    "User": {
                        "type": "object",
                        "required": ["id"],
                        "properties": {"id": {"type": "string", "format": "uuid"}, "email": {"type": "string"}},
                    },
                },
                "securitySchemes": {
                    "bearer": {"type": "http", "scheme": "bearer", "bearerFormat": "JWT"},
                },
            },
        },
    )


@pytest.fixture()
def openapi31_document() -> OpenAPIDocument:
    return cast(
        OpenAPIDocument,
        {
            "openapi": "3.1.0",
            "info": {"title": "Events", "version": "1.0.0"},
            "paths": {
                "/events": {
                    "get": {
                        "operationId": "streamEvents",
                        "tags": ["events"],
                        "responses": {
                            "200": {
                                "description": "stream",
                                "content": {
                                    "text/event-stream": {"schema": {"$ref": "#/components/schemas/Event"}},
                                },
                            }
                        },
                    }
                }
            },
            "components": {
                "schemas": {
                    "Event": {
                        "type": "object",
                        "required": ["id"],
                        "properties": {
                            "id": {"type": "string"},
                            "payload": {"type": ["object", "null"], "additionalProperties": True},
                            "score": {"type": ["number", "null"]},
                        },
                    }
                }
            },
        },
    )
