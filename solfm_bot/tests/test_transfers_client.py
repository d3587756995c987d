"""Tests for the solana.fm transfer history client"""

import asyncio

import httpx
import pytest

from conftest import OTHER, USDC, USER

from solfm_bot.core.models import InstructionAction
from solfm_bot.core.transfers_client import SolanaFmClient
from solfm_bot.exceptions import BotException, FetchException, ParseException


def raw_tx(tx_hash, status="Successful", **overrides):
    instruction = {
        "action": "transfer",
        "status": status,
        "source": USER,
        "sourceAssociation": None,
        "destination": OTHER,
        "destinationAssociation": "assoc",
        "token": USDC,
        "amount": 100,
        "timestamp": 1_700_000_000,
    }
    instruction.update(overrides)
    return {"transactionHash": tx_hash, "data": [instruction]}


def make_client(settings, pages, requests=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        page = int(request.url.params["page"])
        results = pages.get(page, [])
        return httpx.Response(200, json={"message": "ok", "results": results})

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return SolanaFmClient(settings, client=http)


def fetch(client, limit=10):
    return asyncio.run(client.account_transfers(USER, 100, 200, limit))


class TestPagination:

    def test_stops_on_short_page(self, settings):
        requests = []
        client = make_client(settings, {
            1: [raw_tx("a"), raw_tx("b")],
            2: [raw_tx("c")],
            3: [raw_tx("never")],
        }, requests)
        txs = fetch(client)
        assert [t.transaction_hash for t in txs] == ["a", "b", "c"]
        assert len(requests) == 2

    def test_query_parameters(self, settings):
        requests = []
        client = make_client(settings, {1: []}, requests)
        fetch(client)
        request = requests[0]
        assert request.url.path == f"/v0/accounts/{USER}/transfers"
        assert request.url.params["utcFrom"] == "100"
        assert request.url.params["utcTo"] == "200"
        assert request.url.params["page"] == "1"
        assert request.url.params["limit"] == "2"

    def test_stops_at_limit(self, settings):
        requests = []
        client = make_client(settings, {
            1: [raw_tx("a"), raw_tx("b")],
            2: [raw_tx("c"), raw_tx("d")],
            3: [raw_tx("e"), raw_tx("f")],
        }, requests)
        txs = fetch(client, limit=3)
        assert [t.transaction_hash for t in txs] == ["a", "b", "c"]
        assert len(requests) == 2

    def test_parses_instruction_fields(self, settings):
        client = make_client(settings, {1: [raw_tx("a", action="burn", destination=None)]})
        (tx,) = fetch(client)
        (ins,) = tx.instructions
        assert ins.action == InstructionAction.UNKNOWN
        assert ins.destination is None
        assert ins.destination_association == "assoc"
        assert ins.source_association is None
        assert ins.amount == 100

    def test_unsuccessful_kept_by_default(self, settings):
        client = make_client(settings, {1: [raw_tx("a", status="Failed")]})
        assert len(fetch(client)) == 1

    def test_status_filter_flag(self, settings):
        settings.FILTER_FAILED_TRANSACTIONS = True
        client = make_client(settings, {1: [raw_tx("a", status="Failed"), raw_tx("b")], 2: []})
        assert [t.transaction_hash for t in fetch(client)] == ["b"]


class TestFailures:

    def test_http_error_raises_fetch_exception(self, settings):
        http = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(500)))
        client = SolanaFmClient(settings, client=http)
        with pytest.raises(FetchException):
            fetch(client)

    def test_transport_error_raises_fetch_exception(self, settings):
        def handler(request):
            raise httpx.ConnectError("boom", request=request)

        client = SolanaFmClient(settings, client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))
        with pytest.raises(FetchException):
            fetch(client)

    def test_missing_results_raises_parse_exception(self, settings):
        http = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda r: httpx.Response(200, json={"message": "bad"}))
        )
        client = SolanaFmClient(settings, client=http)
        with pytest.raises(ParseException):
            fetch(client)

    def test_malformed_transaction_is_bot_exception(self, settings):
        client = make_client(settings, {1: [{"data": []}]})
        with pytest.raises(BotException):
            fetch(client)
