"""Tests for the command line interface and the HTTP API."""

import json

import pytest
from click.testing import CliRunner
from fastapi.testclient import TestClient

from unflatten import __version__
from unflatten.main import cli
from unflatten.server import app


@pytest.fixture
def flat_dir(tmp_path):
    """A directory holding a flattened project."""
    flat = tmp_path / "flat"
    flat.mkdir()
    (flat / "A.sol").write_text('import "./dir/B.sol";\ncontract A {}\n')
    (flat / "B.sol").write_text('import "lib/C.sol";\ncontract B {}\n')
    (flat / "C.sol").write_text("library C {}\n")
    return flat


class TestCli:
    """Tests for the unflatten command."""

    def test_version(self):
        """Test the version flag."""
        result = CliRunner().invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_source_required(self):
        """Test that a source is required without --serve."""
        result = CliRunner().invoke(cli, [])
        assert result.exit_code != 0

    def test_writes_tree(self, flat_dir, tmp_path):
        """Test writing the recovered tree to the target directory."""
        out = tmp_path / "out"
        result = CliRunner().invoke(cli, [str(flat_dir), "-d", str(out)])

        assert result.exit_code == 0, result.output
        assert (out / "A.sol").exists()
        assert (out / "dir" / "B.sol").exists()
        assert (out / "lib" / "C.sol").exists()

    def test_base_path(self, flat_dir, tmp_path):
        """Test prefixing root-relative imports with a base path."""
        out = tmp_path / "out"
        result = CliRunner().invoke(cli, [str(flat_dir), "-d", str(out), "--base-path", "pkg"])

        assert result.exit_code == 0, result.output
        assert 'import "pkg/lib/C.sol";' in (out / "dir" / "B.sol").read_text()

    def test_dry_run_writes_nothing(self, flat_dir, tmp_path):
        """Test that a dry run leaves the target directory empty."""
        out = tmp_path / "out"
        result = CliRunner().invoke(cli, [str(flat_dir), "-d", str(out), "--dry-run"])

        assert result.exit_code == 0, result.output
        assert "B.sol" in result.output
        assert not out.exists()

    def test_json(self, flat_dir):
        """Test JSON output of the resolved registry."""
        result = CliRunner().invoke(cli, [str(flat_dir), "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert list(data) == ["A.sol", "B.sol", "C.sol"]
        assert data["A.sol"]["relative_path"] == "A.sol"
        assert data["B.sol"] == {
            "name": "B.sol",
            "imports": ["lib/C.sol"],
            "path_fields": ["<ROOT>", "dir"],
            "relative_path": "dir/B.sol",
        }
        assert data["C.sol"]["relative_path"] == "lib/C.sol"

    def test_error_exits_before_writing(self, tmp_path):
        """Test that a resolution error exits non-zero without writing."""
        flat = tmp_path / "flat"
        flat.mkdir()
        (flat / "A.sol").write_text('import "./Missing.sol";\n')
        out = tmp_path / "out"

        result = CliRunner().invoke(cli, [str(flat), "-d", str(out)])

        assert result.exit_code == 1
        assert "Missing.sol" in result.output
        assert not out.exists()


class TestServer:
    """Tests for the HTTP API."""

    @pytest.fixture
    def client(self):
        return TestClient(app)

    def test_health(self, client):
        """Test the health endpoint."""
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_resolve(self, client):
        """Test resolving a listing over HTTP."""
        response = client.post("/resolve", json={
            "files": {
                "A.sol": 'import "./dir/B.sol";',
                "B.sol": "",
            },
        })

        assert response.status_code == 200
        data = response.json()
        assert data["paths"] == {"A.sol": "", "B.sol": "dir"}
        assert data["sweeps"][-1] == 2

    def test_resolve_with_base_path(self, client):
        """Test resolving with a base path over HTTP."""
        response = client.post("/resolve", json={
            "files": {"A.sol": 'import "lib/B.sol";', "B.sol": ""},
            "base_path": "pkg",
        })

        assert response.status_code == 200
        files = {f["name"]: f for f in response.json()["files"]}
        assert files["A.sol"]["content"] == 'import "pkg/lib/B.sol";'
        assert files["B.sol"]["directory"] == "lib"

    def test_resolve_error(self, client):
        """Test that an unknown reference returns 422."""
        response = client.post("/resolve", json={"files": {"A.sol": 'import "./Nope.sol";'}})

        assert response.status_code == 422
        assert "Nope.sol" in response.json()["detail"]

    def test_resolve_empty(self, client):
        """Test that an empty listing returns 400."""
        response = client.post("/resolve", json={"files": {}})
        assert response.status_code == 400
