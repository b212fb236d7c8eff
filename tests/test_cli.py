"""Tests for the command line interface."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from cityscope.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


class TestResolutionCommands:
    def test_resolve(self, runner):
        result = runner.invoke(cli, ["resolve", "--lat", "40.7128", "--lng=-74.0060"])
        assert result.exit_code == 0
        assert "NYC" in result.output
        assert "New York" in result.output

    def test_resolve_out_of_range(self, runner):
        result = runner.invoke(cli, ["resolve", "--lat", "95", "--lng", "0"])
        assert result.exit_code == 2

    def test_within(self, runner):
        result = runner.invoke(cli, ["within", "--lat", "40.7128", "--lng=-74.0060", "--max-distance", "5"])
        assert result.exit_code == 0
        assert "yes" in result.output

    def test_within_negative_distance(self, runner):
        result = runner.invoke(cli, ["within", "--lat", "0", "--lng", "0", "--max-distance=-1"])
        assert result.exit_code == 2

    def test_radius(self, runner):
        result = runner.invoke(cli, ["radius", "--lat", "40.7128", "--lng=-74.0060"])
        assert result.exit_code == 0
        assert result.output.strip() == "45.0"

    def test_market(self, runner):
        result = runner.invoke(cli, ["market", "new-york"])
        assert result.exit_code == 0
        assert json.loads(result.output)["market_id"] == "35"

    def test_unknown_market_city(self, runner):
        result = runner.invoke(cli, ["market", "atlantis"])
        assert result.exit_code == 1

    def test_metros(self, runner):
        result = runner.invoke(cli, ["metros", "--min-population", "3000000"])
        assert result.exit_code == 0
        assert "NYC" in result.output
        assert "LA" in result.output
        assert "Chicago" not in result.output

    def test_metros_negative_population(self, runner):
        result = runner.invoke(cli, ["metros", "--min-population=-1"])
        assert result.exit_code == 2

    def test_nearby(self, runner):
        result = runner.invoke(cli, ["nearby", "--lat", "40.7128", "--lng=-74.0060"])
        assert result.exit_code == 0
        assert "Philly" in result.output


class TestClusterCommand:
    def test_json_output(self, runner, tmp_path):
        items = tmp_path / "items.json"
        items.write_text(json.dumps([
            {"id": "a", "lat": 40.7128, "lng": -74.0060},
            {"id": "b", "lat": 40.7138, "lng": -74.0060},
            {"id": "c", "lat": 34.0522, "lng": -118.2437},
        ]))
        result = runner.invoke(cli, ["cluster", str(items), "--zoom", "10", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert len(data["clusters"]) == 1
        assert [s["id"] for s in data["singles"]] == ["c"]

    def test_table_output(self, runner, tmp_path):
        items = tmp_path / "items.json"
        items.write_text(json.dumps([{"id": "solo", "lat": 1, "lng": 1}]))
        result = runner.invoke(cli, ["cluster", str(items), "--zoom", "10"])
        assert result.exit_code == 0
        assert "solo" in result.output

    def test_invalid_zoom(self, runner, tmp_path):
        items = tmp_path / "items.json"
        items.write_text("[]")
        result = runner.invoke(cli, ["cluster", str(items), "--zoom=-3"])
        assert result.exit_code == 1

    @pytest.mark.parametrize("content", [
        '{"id": "a", "lat": 1, "lng": 1}',
        '["a", "b"]',
        "[{not json",
    ])
    def test_malformed_items_file(self, runner, tmp_path, content):
        items = tmp_path / "items.json"
        items.write_text(content)
        result = runner.invoke(cli, ["cluster", str(items), "--zoom", "10"])
        assert result.exit_code == 1
        assert not isinstance(result.exception, (AttributeError, ValueError))

    def test_missing_id(self, runner, tmp_path):
        items = tmp_path / "items.json"
        items.write_text(json.dumps([{"lat": 1, "lng": 1}]))
        result = runner.invoke(cli, ["cluster", str(items), "--zoom", "10"])
        assert result.exit_code == 1


class TestPlanCommand:
    def test_plan(self, runner):
        result = runner.invoke(cli, ["plan", "--lat", "45", "--lng=-110"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["strategy"] == "nearby-cities"
        assert "latlong" in data["params"] or "marketId" in data["params"]
