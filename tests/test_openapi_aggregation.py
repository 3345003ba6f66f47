"""Tests for converting whole OpenAPI documents."""

from __future__ import annotations

import json
import logging
from typing import Any

import pytest

from openapi_typegen import openapi_to_types
from openapi_typegen.codegen.core.naming import operation_type_name, pascal_join
from openapi_typegen.codegen.languages.typescript import TypeScriptGenerator
from openapi_typegen.openapi import (
    InvalidDocumentError,
    OpenApiComponent,
    OpenApiConverter,
    PathError,
)


def _document() -> dict[str, Any]:
    return {
        "openapi": "3.0.3",
        "info": {"title": "Users", "version": "1.0.0"},
        "paths": {
            "/users/{id}": {
                "parameters": [
                    {"name": "id", "in": "path", "required": True, "schema": {"type": "string"}}
                ],
                "get": {
                    "summary": "Fetch a user",
                    "parameters": [
                        {"name": "verbose", "in": "query", "schema": {"type": "boolean"}}
                    ],
                    "responses": {
                        "200": {
                            "description": "OK",
                            "content": {
                                "application/json": {
                                    "schema": {"$ref": "#/components/schemas/User"}
                                }
                            },
                        },
                        "404": {
                            "description": "Missing",
                            "content": {
                                "application/problem+json": {
                                    "schema": {
                                        "type": "object",
                                        "properties": {"detail": {"type": "string"}},
                                    }
                                }
                            },
                        },
                        "204": {"description": "No content"},
                    },
                },
                "put": {
                    "requestBody": {
                        "content": {
                            "application/json": {
                                "schema": {"$ref": "#/components/schemas/User"}
                            }
                        }
                    },
                    "responses": {
                        "200": {
                            "description": "Updated",
                            "content": {"application/json": {"schema": {"type": "boolean"}}},
                        }
                    },
                },
            },
            "/health": {
                "get": {
                    "responses": {
                        "200": {
                            "description": "Plain text",
                            "content": {"text/plain": {"schema": {"type": "string"}}},
                        }
                    }
                }
            },
            "/shared": {"$ref": "#/components/pathItems/Shared"},
        },
        "components": {
            "schemas": {
                "User": {
                    "type": "object",
                    "properties": {"id": {"type": "string"}, "name": {"type": "string"}},
                    "required": ["id"],
                }
            }
        },
    }


def test_components_are_converted_by_name() -> None:
    output = openapi_to_types(_document())

    assert output.components == [
        OpenApiComponent(
            "User", "export type User = {\n  id: string;\n  name?: string;\n};"
        )
    ]


def test_operations_follow_path_and_method_order() -> None:
    output = openapi_to_types(_document())

    assert [(path.method, path.path) for path in output.paths] == [
        ("get", "/users/{id}"),
        ("put", "/users/{id}"),
        ("get", "/health"),
    ]


def test_parameter_groups_and_responses() -> None:
    get_user = openapi_to_types(_document()).paths[0]

    assert get_user.summary == "Fetch a user"
    assert get_user.query_ts_type == (
        "export type GetUsersIdQuery = {\n  verbose?: boolean;\n};"
    )
    assert get_user.path_ts_type == "export type GetUsersIdPath = {\n  id: string;\n};"
    assert get_user.request_body is None
    assert list(get_user.responses) == ["200", "404"]
    assert get_user.responses["200"].ts_type == "export type GetUsersIdResponse = User;"
    assert get_user.responses["200"].description == "OK"
    assert get_user.responses["404"].ts_type == (
        "export type GetUsersIdResponse = {\n  detail?: string;\n};"
    )


def test_request_body_and_shared_path_parameters() -> None:
    put_user = openapi_to_types(_document()).paths[1]

    assert put_user.query_ts_type is None
    assert put_user.path_ts_type == "export type PutUsersIdPath = {\n  id: string;\n};"
    assert put_user.request_body == "export type PutUsersIdBody = User;"
    assert put_user.responses["200"].ts_type == "export type PutUsersIdResponse = boolean;"


def test_non_json_responses_are_skipped() -> None:
    health = openapi_to_types(_document()).paths[2]

    assert health.responses == {}
    assert health.query_ts_type is None
    assert health.path_ts_type is None


def test_path_item_reference_is_recorded_and_others_continue() -> None:
    output = openapi_to_types(_document())

    assert output.errors == [
        PathError(
            "/shared",
            "Reference not supported at #/paths/~1shared: #/components/pathItems/Shared",
        )
    ]
    assert len(output.paths) == 3


def test_response_reference_aborts_only_that_path() -> None:
    document = _document()
    document["paths"]["/health"]["get"]["responses"]["500"] = {
        "$ref": "#/components/responses/Error"
    }

    output = openapi_to_types(document)

    assert [error.path for error in output.errors] == ["/health", "/shared"]
    assert [path.path for path in output.paths] == ["/users/{id}", "/users/{id}"]


def test_operation_parameter_overrides_shared_parameter() -> None:
    document = {
        "openapi": "3.1.0",
        "paths": {
            "/items": {
                "parameters": [
                    {"name": "limit", "in": "query", "schema": {"type": "string"}}
                ],
                "get": {
                    "parameters": [
                        {
                            "name": "limit",
                            "in": "query",
                            "required": True,
                            "schema": {"type": "integer"},
                        },
                        {"name": "X-Trace", "in": "header", "schema": {"type": "string"}},
                    ]
                },
            }
        },
    }

    [operation] = openapi_to_types(document).paths

    assert operation.query_ts_type == "export type GetItemsQuery = {\n  limit: number;\n};"
    assert operation.responses == {}


def test_parameter_reference_is_skipped(caplog: pytest.LogCaptureFixture) -> None:
    document = {
        "openapi": "3.0.0",
        "paths": {
            "/items": {
                "get": {
                    "parameters": [
                        {"$ref": "#/components/parameters/Page"},
                        {"name": "q", "in": "query", "schema": {"type": "string"}},
                    ]
                }
            }
        },
    }

    with caplog.at_level(logging.WARNING, logger="openapi_typegen"):
        [operation] = openapi_to_types(document).paths

    assert operation.query_ts_type == "export type GetItemsQuery = {\n  q?: string;\n};"
    assert "Parameter references are not supported" in caplog.text


def test_parameter_without_schema_contributes_no_property() -> None:
    document = {
        "openapi": "3.0.0",
        "paths": {
            "/search": {
                "get": {
                    "parameters": [
                        {
                            "name": "filter",
                            "in": "query",
                            "required": True,
                            "content": {"application/json": {"schema": {"type": "object"}}},
                        }
                    ]
                }
            }
        },
    }

    [operation] = openapi_to_types(document).paths

    assert operation.query_ts_type == "export type GetSearchQuery = {};"


def test_swagger_definitions_are_components() -> None:
    document = {
        "swagger": "2.0",
        "paths": {},
        "definitions": {"Pet": {"type": "string", "enum": ["cat", "dog"]}},
    }

    output = openapi_to_types(document)

    assert output.components == [
        OpenApiComponent("Pet", 'export type Pet = "cat" | "dog";')
    ]


def test_options_apply_to_every_declaration() -> None:
    document = {
        "openapi": "3.0.0",
        "paths": {},
        "components": {
            "schemas": {
                "Free": {},
                "Shape": {"type": "object", "properties": {"x": {"type": "number"}}},
            }
        },
    }

    output = openapi_to_types(
        document, {"preferUnknownOverAny": True, "preferInterfaceOverType": True}
    )

    assert [component.ts_type for component in output.components] == [
        "export type Free = unknown;",
        "export interface Shape {\n  x?: number;\n};",
    ]


def test_diagnostics_are_forwarded() -> None:
    pointers: list[str] = []
    document = {
        "openapi": "3.0.0",
        "paths": {},
        "components": {"schemas": {"Odd": {"type": "file"}}},
    }

    openapi_to_types(document, on_diagnostic=lambda d: pointers.append(d.pointer))

    assert pointers == ["#/components/schemas/Odd"]


def test_document_given_as_json_text() -> None:
    output = openapi_to_types(json.dumps(_document()))

    assert len(output.paths) == 3


@pytest.mark.parametrize(
    ("document", "message"),
    [
        ("{broken", "Invalid JSON"),
        ([], "must be a JSON object"),
        ({"paths": {}}, "Missing 'openapi' version field"),
        ({"openapi": "3.0.0"}, "must have a 'paths' object"),
        ({"openapi": "3.0.0", "paths": {}, "components": []}, "'components' must be an object"),
        (
            {"openapi": "3.0.0", "paths": {}, "components": {"schemas": []}},
            "'#/components/schemas' must be an object",
        ),
        (
            {"openapi": "3.0.0", "paths": {"/a": []}},
            "Path item at #/paths/~1a must be an object",
        ),
        (
            {
                "openapi": "3.0.0",
                "paths": {},
                "components": {"schemas": {"Bad": {"type": "object", "required": "x"}}},
            },
            "'required' must be a list of strings",
        ),
    ],
)
def test_invalid_documents_raise(document: object, message: str) -> None:
    with pytest.raises(InvalidDocumentError, match=message):
        openapi_to_types(document)


def test_to_dict_uses_camel_case_records() -> None:
    data = openapi_to_types(_document()).to_dict()

    assert set(data) == {"paths", "components", "errors"}
    first = data["paths"][0]
    assert set(first) == {
        "path",
        "method",
        "summary",
        "description",
        "queryTsType",
        "pathTsType",
        "requestBody",
        "responses",
    }
    assert first["responses"]["200"] == {
        "description": "OK",
        "tsType": "export type GetUsersIdResponse = User;",
    }
    assert data["components"][0]["name"] == "User"
    assert data["errors"][0]["path"] == "/shared"
    json.dumps(data)


def test_render_module_names_every_response_once() -> None:
    module = openapi_to_types(_document()).render_module()

    assert module.startswith("// Components\n\nexport type User = {")
    assert "// GET /users/{id}: Fetch a user\n" in module
    assert "// PUT /users/{id}\n" in module
    assert "export type GetUsersIdResponse200 = User;" in module
    assert "export type GetUsersIdResponse404 = {\n  detail?: string;\n};" in module
    assert "export type GetUsersIdResponse = " not in module
    assert "export type PutUsersIdResponse = boolean;" in module
    assert module.endswith(";\n")
    assert "\n\n\n" not in module


def test_render_module_with_header_and_custom_generator() -> None:
    generator = TypeScriptGenerator({"header_comment": "Generated file", "add_comments": False})

    module = OpenApiConverter(generator).convert(_document()).render_module()

    assert module.startswith("// Generated file\n\nexport type User = {")
    assert "// GET" not in module


def test_operation_type_names() -> None:
    assert operation_type_name("GET", "/users/{id}") == "GetUsersId"
    assert operation_type_name("post", "/users/{user-id}/posts") == "PostUsersUserIdPosts"
    assert operation_type_name("delete", "/") == "Delete"
    assert operation_type_name("get", "/v1/pet_store.json") == "GetV1PetStoreJson"
    assert pascal_join(["404"]) == "404"
