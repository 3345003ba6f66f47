"""Tests for the openapi-typegen command line interface."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from openapi_typegen.cli import create_parser, main

USER_SCHEMA = {
    "type": "object",
    "properties": {
        "id": {"type": "string"},
        "extra": {},
    },
    "required": ["id"],
}

DOCUMENT = {
    "openapi": "3.0.0",
    "paths": {
        "/users": {
            "get": {
                "responses": {
                    "200": {
                        "description": "OK",
                        "content": {
                            "application/json": {
                                "schema": {
                                    "type": "array",
                                    "items": {"$ref": "#/components/schemas/User"},
                                }
                            }
                        },
                    }
                }
            }
        },
        "/legacy": {"$ref": "#/x"},
    },
    "components": {"schemas": {"User": USER_SCHEMA}},
}


def _write_json(tmp_path: Path, name: str, data: object) -> Path:
    path = tmp_path / name
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_schema_command_prints_raw_code(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    path = _write_json(tmp_path, "user.json", USER_SCHEMA)

    exit_code = main(["schema", str(path), "--name", "User", "--raw"])

    assert exit_code == 0
    assert capsys.readouterr().out == (
        "export type User = {\n  id: string;\n  extra?: any;\n};\n"
    )


def test_schema_command_generation_flags(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    path = _write_json(tmp_path, "user.json", USER_SCHEMA)

    exit_code = main(
        [
            "schema",
            str(path),
            "-n",
            "User",
            "--raw",
            "--prefer-unknown",
            "--prefer-interface",
            "--indent-size",
            "4",
            "--header",
            "Generated",
        ]
    )

    assert exit_code == 0
    assert capsys.readouterr().out == (
        "// Generated\n\nexport interface User {\n    id: string;\n    extra?: unknown;\n};\n"
    )


def test_schema_command_reads_config_file(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    path = _write_json(tmp_path, "user.json", USER_SCHEMA)
    config = _write_json(tmp_path, "typegen.json", {"preferUnknownOverAny": True})

    exit_code = main(["schema", str(path), "--config", str(config), "--raw"])

    assert exit_code == 0
    assert "extra?: unknown;" in capsys.readouterr().out


def test_schema_command_writes_output_file(tmp_path: Path) -> None:
    path = _write_json(tmp_path, "user.json", USER_SCHEMA)
    output = tmp_path / "user.ts"

    exit_code = main(["schema", str(path), "--name", "User", "-o", str(output)])

    assert exit_code == 0
    assert output.read_text(encoding="utf-8").startswith("export type User = {")


def test_schema_command_reads_stdin(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO('{"type": "string", "nullable": true}'))

    exit_code = main(["schema", "--stdin", "--name", "Maybe", "--raw"])

    assert exit_code == 0
    assert capsys.readouterr().out == "export type Maybe = string | null;\n"


def test_schema_command_verbose_shows_metadata(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    path = _write_json(tmp_path, "user.json", USER_SCHEMA)

    exit_code = main(["schema", str(path), "--raw", "--verbose"])

    assert exit_code == 0
    out = capsys.readouterr().out
    assert out.startswith("export type Root = {")
    assert "Schema Count" in out


def test_missing_input_file_fails(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    exit_code = main(["schema", str(tmp_path / "absent.json")])

    assert exit_code == 1
    assert "Failed to load input" in capsys.readouterr().out


def test_malformed_schema_fails(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    path = _write_json(tmp_path, "bad.json", {"type": "object", "properties": []})

    exit_code = main(["schema", str(path)])

    assert exit_code == 1
    assert "Error" in capsys.readouterr().out


def test_bad_config_file_fails(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    path = _write_json(tmp_path, "user.json", USER_SCHEMA)
    config = _write_json(tmp_path, "typegen.json", {"indentSize": "wide"})

    exit_code = main(["schema", str(path), "--config", str(config)])

    assert exit_code == 1
    assert "Configuration error" in capsys.readouterr().out


def test_openapi_command_renders_module(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    path = _write_json(tmp_path, "api.json", DOCUMENT)

    exit_code = main(["openapi", str(path), "--raw"])

    assert exit_code == 0
    captured = capsys.readouterr()
    assert "// Components\n" in captured.out
    assert "export type GetUsersResponse = User[];" in captured.out
    assert "Skipped path /legacy" in captured.err


def test_openapi_command_json_records(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    path = _write_json(tmp_path, "api.json", DOCUMENT)

    exit_code = main(["openapi", str(path), "--format", "json", "--raw"])

    assert exit_code == 0
    data = json.loads(capsys.readouterr().out)
    assert data["paths"][0]["responses"]["200"]["tsType"] == (
        "export type GetUsersResponse = User[];"
    )
    assert data["components"][0]["name"] == "User"
    assert data["errors"][0]["path"] == "/legacy"


def test_openapi_command_rejects_non_openapi_document(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    path = _write_json(tmp_path, "schema.json", USER_SCHEMA)

    exit_code = main(["openapi", str(path)])

    assert exit_code == 1
    assert "openapi" in capsys.readouterr().out


def test_subcommand_is_required() -> None:
    with pytest.raises(SystemExit) as excinfo:
        main([])

    assert excinfo.value.code == 2


def test_input_sources_are_exclusive(tmp_path: Path) -> None:
    with pytest.raises(SystemExit):
        create_parser().parse_args(["schema", str(tmp_path / "a.json"), "--stdin"])


def test_version(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["--version"])

    assert excinfo.value.code == 0
    assert "openapi-typegen 0.1.0" in capsys.readouterr().out
