"""Tests for the command-line interface."""

import json

import httpx
import pytest

from scrybe.cli import main_async, parse_args


def error(status, details):
    return httpx.Response(status, json={"object": "error", "status": status, "details": details})


class TestParseArgs:
    """Tests for argument parsing."""

    def test_search(self):
        args = parse_args(["search", "t:goblin", "--order", "cmc", "-n", "5", "--format", "csv"])
        assert args.command == "search"
        assert args.query == "t:goblin"
        assert args.order == "cmc"
        assert args.limit == 5
        assert args.format == "csv"

    def test_card_requires_lookup(self):
        with pytest.raises(SystemExit):
            parse_args(["card"])

    def test_random_without_query(self):
        args = parse_args(["card", "--random"])
        assert args.random == ""

    def test_bulk(self, tmp_path):
        args = parse_args(["--cache-dir", str(tmp_path), "bulk", "fetch", "oracle_cards"])
        assert args.bulk_action == "fetch"
        assert args.kind == "oracle_cards"
        assert args.cache_dir == tmp_path


class TestCommands:
    """Tests for command handlers."""

    @pytest.mark.asyncio
    async def test_search_table(self, make_api, make_card, list_payload, capsys):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=list_payload([make_card()], total_cards=1))

        args = parse_args(["search", "t:instant c:r", "--order", "usd"])
        assert await main_async(args, make_api(handler)) == 0

        out = capsys.readouterr().out
        assert "Lightning Bolt" in out
        assert "1 of 1 cards" in out
        params = seen[0].url.params
        assert params["q"] == "type:instant color:r"
        assert params["order"] == "usd"

    @pytest.mark.asyncio
    async def test_search_limit(self, make_api, make_card, list_payload, capsys):
        page = list_payload(
            [make_card(), make_card(name="Shock")],
            next_page="https://api.scryfall.com/cards/search?page=2",
            total_cards=400,
        )
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json=page)

        args = parse_args(["search", "c:r", "-n", "1", "--format", "json"])
        assert await main_async(args, make_api(handler)) == 0
        cards = json.loads(capsys.readouterr().out)
        assert [c["name"] for c in cards] == ["Lightning Bolt"]
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_invalid_query_exit_code(self, make_api, capsys):
        """Test a malformed query exits with 2 before any request."""
        calls = []
        args = parse_args(["search", "(t:goblin"])
        assert await main_async(args, make_api(lambda r: calls.append(r))) == 2
        assert "Invalid query" in capsys.readouterr().err
        assert calls == []

    @pytest.mark.asyncio
    async def test_provider_error_exit_code(self, make_api, capsys):
        args = parse_args(["card", "--name", "Nonexistent"])
        assert await main_async(args, make_api(lambda r: error(404, "No card found"))) == 1
        assert "No card found" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_card_json(self, make_api, make_card, capsys):
        args = parse_args(["card", "--name", "bolt", "--fuzzy"])
        api = make_api(lambda r: httpx.Response(200, json=make_card()))
        assert await main_async(args, api) == 0
        data = json.loads(capsys.readouterr().out)
        assert data[0]["name"] == "Lightning Bolt"

    @pytest.mark.asyncio
    async def test_rulings_and_sets(self, make_api, ruling, card_set, list_payload, capsys):
        def handler(request):
            if request.url.path == "/sets":
                return httpx.Response(200, json=list_payload([card_set]))
            return httpx.Response(200, json=list_payload([ruling]))

        api = make_api(handler)
        assert await main_async(parse_args(["rulings", "abc"]), api) == 0
        assert "planeswalker" in capsys.readouterr().out
        assert await main_async(parse_args(["sets", "--format", "csv"]), api) == 0
        assert "a25,Masters 25,masters" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_bulk_fetch_and_count(self, make_api, make_card, list_payload, tmp_path, capsys):
        download_uri = "https://data.scryfall.io/oracle-cards/oracle-cards.json"
        entry = {
            "object": "bulk_data",
            "id": "27bf3214-1271-490b-bdfe-c0be6c23d02e",
            "type": "oracle_cards",
            "updated_at": "2024-05-01T09:00:00+00:00",
            "download_uri": download_uri,
            "size": 100,
        }

        def handler(request):
            if str(request.url) == download_uri:
                return httpx.Response(200, content=json.dumps([make_card(), make_card()]).encode())
            return httpx.Response(200, json=list_payload([entry]))

        api = make_api(handler)
        cache_args = ["--cache-dir", str(tmp_path)]

        assert await main_async(parse_args(cache_args + ["bulk", "fetch", "oracle_cards"]), api) == 0
        assert "oracle_cards:" in capsys.readouterr().out

        assert await main_async(parse_args(cache_args + ["bulk", "count", "oracle_cards"]), api) == 0
        assert "oracle_cards: 2 records" in capsys.readouterr().out

        assert await main_async(parse_args(cache_args + ["bulk", "cached"]), api) == 0
        assert entry["id"] in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_bulk_stale_manifest(self, make_api, tmp_path, capsys):
        args = parse_args(["--cache-dir", str(tmp_path), "bulk", "fetch", "oracle_cards"])
        assert await main_async(args, make_api(lambda r: error(503, "Maintenance"))) == 1
        assert "Could not check freshness" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_bulk_count_without_snapshot(self, make_api, tmp_path, capsys):
        args = parse_args(["--cache-dir", str(tmp_path), "bulk", "count", "rulings"])
        assert await main_async(args, make_api(lambda r: error(500, "unused"))) == 1
        assert "No cached snapshot" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_validate(self, capsys):
        assert await main_async(parse_args(["validate", "--strict"])) == 0
        assert "Configuration is valid." in capsys.readouterr().out
