import asyncio
import json

import pytest
import websockets
from websockets.exceptions import ConnectionClosedError
from websockets.frames import Close

from gateway_fakes import FakeDirectConn, direct_reply
from obclient.core.errors import ChannelClosedError, TransportError
from obclient.venue.ws_client import DirectChannel


def _channel(conn, urls=None):
    def connect(url):
        if urls is not None:
            urls.append(url)
        return conn

    return DirectChannel(connect=connect)


def test_direct_channel_resolves_on_first_finished_frame():
    conn = FakeDirectConn(
        [
            "error: noise",
            "[1, 2, 3]",
            direct_reply("Created", ident=3),
            direct_reply("Pending", ident=3),
            direct_reply("Finished", {"OptionU64": 42}, ident=3),
            direct_reply("Finished", {"OptionU64": 0}, ident=3),
        ]
    )
    urls = []
    result = asyncio.run(_channel(conn, urls).request("ws://gw/ws/order_book/best_bid", {}))
    assert result == {"OptionU64": 42}
    assert urls == ["ws://gw/ws/order_book/best_bid"]
    assert conn.sent == [{}]
    assert conn.closed


def test_direct_channel_reads_tagged_status_object():
    conn = FakeDirectConn(
        [{"meta": {"id": 3, "status": {"type": "Finished"}}, "result": {"OptionU64": 42}}]
    )
    assert asyncio.run(_channel(conn).request("ws://gw/x", {})) == {"OptionU64": 42}


def test_direct_channel_non_terminal_statuses_do_not_resolve():
    conn = FakeDirectConn([direct_reply("Created"), direct_reply("Pending", {"U64": 1})])
    with pytest.raises(ChannelClosedError):
        asyncio.run(_channel(conn).request("ws://gw/x", {}))


def test_direct_channel_ignores_bare_string_status():
    # the gateway never sends a bare status; such frames are malformed
    conn = FakeDirectConn([{"meta": {"status": "Finished"}, "result": {"U64": 1}}])
    with pytest.raises(ChannelClosedError):
        asyncio.run(_channel(conn).request("ws://gw/x", {}))


def test_direct_channel_sends_payload_once():
    conn = FakeDirectConn([direct_reply("Finished", {"ArrayTrade": []})])
    payload = {"id": 10, "price": 101, "qty": 3}
    asyncio.run(_channel(conn).request("ws://gw/ws/order_book/add_buy", payload))
    assert conn.sent == [payload]


def test_direct_channel_closed_before_finished():
    conn = FakeDirectConn([direct_reply("Pending")])
    with pytest.raises(ChannelClosedError):
        asyncio.run(_channel(conn).request("ws://gw/x", {}))
    assert conn.closed


def test_direct_channel_reset_is_transport_error():
    conn = FakeDirectConn(error=ConnectionClosedError(Close(1011, "boom"), None))
    with pytest.raises(TransportError):
        asyncio.run(_channel(conn).request("ws://gw/x", {}))


def test_direct_channel_connection_refused():
    def refuse(url):
        raise ConnectionRefusedError(111, "refused")

    with pytest.raises(TransportError):
        asyncio.run(DirectChannel(connect=refuse).request("ws://gw/x", {}))


def test_direct_channel_against_local_server():
    async def handler(ws):
        payload = json.loads(await ws.recv())
        await ws.send("error: not a frame")
        await ws.send(json.dumps(direct_reply("Pending", ident=1)))
        await ws.send(
            json.dumps(direct_reply("Finished", {"U64": payload["n"] * 2}, ident=1))
        )

    async def main():
        async with websockets.serve(handler, "127.0.0.1", 0) as server:
            port = list(server.sockets)[0].getsockname()[1]
            return await DirectChannel().request(f"ws://127.0.0.1:{port}", {"n": 21})

    assert asyncio.run(main()) == {"U64": 42}
