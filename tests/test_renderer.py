"""
Tests for whole-document rendering.
"""
import pytest

from urpc_sdk import (
    DocumentRenderer, InspectorView, URPCClient, URPCConfig, StubTransport,
    MalformedDocumentError, MissingEndpointError, render_document
)

from tests.test_helpers import (
    RPC_URL, STETH, UNSTETH, BALANCE_OF, TOTAL_SUPPLY, build_document, hex_result, rpc_response
)


def _balance_calldata(holder):
    return BALANCE_OF + "0" * 24 + holder[2:]


@pytest.mark.asyncio
async def test_render_over_http(requests_mock):
    """Test a full render against an HTTP endpoint"""
    requests_mock.post(RPC_URL + "/", json=rpc_response(hex_result(25_000 * 10**18)))
    document = build_document("<p>Total: <u-c>$stETH.balanceOf($stETH).18</u-c></p>")

    with URPCClient() as client:
        rendered = await DocumentRenderer(client).render(document)

    assert rendered.rendered_text == "<html>\n<body>\n<p>Total: 25,000</p>\n</body>\n</html>"
    assert requests_mock.call_count == 1
    assert requests_mock.last_request.json() == {
        "jsonrpc": "2.0",
        "id": 1,
        "method": "eth_call",
        "params": [{"to": STETH, "data": _balance_calldata(STETH)}, "latest"],
    }


@pytest.mark.asyncio
async def test_declaration_blocks_removed(renderer):
    """Test that the endpoint and directory never leak into the output"""
    rendered = await renderer.render(build_document("<p><u-c>$stETH.totalSupply().18</u-c></p>"))

    assert "u-url" not in rendered.rendered_text
    assert "u-directory" not in rendered.rendered_text
    assert RPC_URL not in rendered.rendered_text
    assert STETH not in rendered.rendered_text
    assert "<p>9,500,000</p>" in rendered.rendered_text


@pytest.mark.asyncio
async def test_results_in_document_order(renderer):
    """Test that each call site gets its own result, in place"""
    body = (
        "<ul>\n"
        "<li><u-c>$stETH.balanceOf($stETH).18</u-c></li>\n"
        "<li><u-c>$stETH.balanceOf($unstETH).18</u-c></li>\n"
        "<li><u-c>$stETH.totalSupply().18</u-c></li>\n"
        "</ul>"
    )

    rendered = await renderer.render(build_document(body))

    assert (
        "<ul>\n<li>25,000</li>\n<li>1.5</li>\n<li>9,500,000</li>\n</ul>"
        in rendered.rendered_text
    )
    assert list(rendered.results_by_key) == [
        "$stETH.balanceOf($stETH).18",
        "$stETH.balanceOf($unstETH).18",
        "$stETH.totalSupply().18",
    ]


@pytest.mark.asyncio
async def test_explicit_keys(renderer):
    """Test that results are reported under the key attribute"""
    body = '<u-c key="pool">$stETH.balanceOf($stETH).18</u-c> <u-c key="wq">$stETH.balanceOf($unstETH).18</u-c>'

    rendered = await renderer.render(build_document(body))

    assert rendered.results_by_key["pool"].display_value == "25,000"
    assert rendered.results_by_key["wq"].display_value == "1.5"
    assert rendered.results_by_key["wq"].resolved.args == [UNSTETH]
    assert rendered.results_by_key["wq"].call.key == "wq"


@pytest.mark.asyncio
async def test_identical_keyless_calls(renderer, stub_transport):
    """Test that repeated keyless calls share a key and a single request"""
    body = "<p><u-c>$stETH.totalSupply().18</u-c> and <u-c>$stETH.totalSupply().18</u-c></p>"

    rendered = await renderer.render(build_document(body))

    assert "<p>9,500,000 and 9,500,000</p>" in rendered.rendered_text
    assert len(rendered.results_by_key) == 1
    assert len(stub_transport.calls) == 1


@pytest.mark.asyncio
async def test_partial_failure(renderer):
    """Test that one failing call does not affect the others"""
    body = "<p><u-c>$nobody.totalSupply().18</u-c></p>\n<p><u-c>$stETH.totalSupply().18</u-c></p>"

    rendered = await renderer.render(build_document(body))

    assert "<p>Error in RPC call</p>\n<p>9,500,000</p>" in rendered.rendered_text
    failed = rendered.results_by_key["$nobody.totalSupply().18"]
    assert not failed.ok
    assert failed.error == "Unknown symbol: $nobody"
    assert rendered.results_by_key["$stETH.totalSupply().18"].ok


@pytest.mark.asyncio
async def test_remote_error_preserved(stub_client, stub_transport):
    """Test that the endpoint's error message is kept on the result"""
    stub_transport.errors[(STETH, TOTAL_SUPPLY)] = "execution reverted: paused"
    renderer = DocumentRenderer(stub_client)

    rendered = await renderer.render(build_document('<u-c key="supply">$stETH.totalSupply().18</u-c>'))

    assert rendered.results_by_key["supply"].error == "execution reverted: paused"
    assert "Error in RPC call" in rendered.rendered_text


@pytest.mark.asyncio
async def test_failures_are_logged(renderer, caplog):
    await renderer.render(build_document("<u-c>$stETH.totalSupply(</u-c>"))

    assert "Call site '$stETH.totalSupply(' failed" in caplog.text


@pytest.mark.asyncio
async def test_custom_error_marker(stub_transport):
    config = URPCConfig(error_marker="n/a")
    renderer = DocumentRenderer(URPCClient(RPC_URL, transport=stub_transport, config=config))

    rendered = await renderer.render(build_document("<p><u-c>$nobody.totalSupply()</u-c></p>"))

    assert "<p>n/a</p>" in rendered.rendered_text


@pytest.mark.asyncio
async def test_raw_result_without_decimals(renderer):
    rendered = await renderer.render(build_document("<p><u-c>$stETH.totalSupply()</u-c></p>"))

    assert f"<p>{hex_result(9_500_000 * 10**18)}</p>" in rendered.rendered_text


@pytest.mark.asyncio
async def test_call_text_outside_blocks_untouched(renderer):
    """Test that only call blocks are rewritten, not matching plain text"""
    body = "<p>$stETH.totalSupply().18 = <u-c>$stETH.totalSupply().18</u-c></p>"

    rendered = await renderer.render(build_document(body))

    assert "<p>$stETH.totalSupply().18 = 9,500,000</p>" in rendered.rendered_text


@pytest.mark.asyncio
async def test_document_without_calls(renderer, stub_transport):
    rendered = await renderer.render(build_document("<p>nothing to see</p>"))

    assert rendered.rendered_text == "<html>\n<body>\n<p>nothing to see</p>\n</body>\n</html>"
    assert rendered.results_by_key == {}
    assert stub_transport.calls == []


@pytest.mark.asyncio
async def test_missing_endpoint(renderer, stub_transport):
    with pytest.raises(MissingEndpointError):
        await renderer.render(build_document("<u-c>$stETH.totalSupply().18</u-c>", url=None))
    assert stub_transport.calls == []


@pytest.mark.asyncio
async def test_empty_endpoint(renderer):
    with pytest.raises(MissingEndpointError, match="empty"):
        await renderer.render(build_document("<p>x</p>", url=" "))


@pytest.mark.asyncio
@pytest.mark.parametrize("url", ["ftp://node", "node:8545", "http://"])
async def test_invalid_endpoint(renderer, url):
    with pytest.raises(MalformedDocumentError, match="Invalid endpoint URL"):
        await renderer.render(build_document("<p>x</p>", url=url))


@pytest.mark.asyncio
async def test_duplicate_endpoint(renderer):
    document = build_document("<u-url>http://other</u-url>")

    with pytest.raises(MalformedDocumentError, match="2 <u-url> blocks"):
        await renderer.render(document)


@pytest.mark.asyncio
async def test_missing_directory(renderer, stub_transport):
    document = "<u-url>http://node</u-url>\n<p><u-c>$stETH.totalSupply().18</u-c></p>"

    with pytest.raises(MalformedDocumentError, match="no <u-directory> block"):
        await renderer.render(document)
    assert stub_transport.calls == []


@pytest.mark.asyncio
async def test_unterminated_call_block(renderer, stub_transport):
    """Test that a broken document is rejected before any call is made"""
    body = "<p><u-c>$stETH.totalSupply().18</u-c></p>\n<p><u-c>$stETH.totalSupply().18</p>"

    with pytest.raises(MalformedDocumentError, match="Unterminated <u-c>"):
        await renderer.render(build_document(body))
    assert stub_transport.calls == []


@pytest.mark.asyncio
async def test_cache_shared_across_renders(renderer, stub_transport):
    document = build_document("<u-c>$stETH.balanceOf($unstETH).18</u-c>")

    first = await renderer.render(document)
    second = await renderer.render(document)

    assert first.rendered_text == second.rendered_text
    assert len(stub_transport.calls) == 1
    assert stub_transport.calls[0][3] == _balance_calldata(UNSTETH)


@pytest.mark.asyncio
async def test_inspector_view(stub_client):
    renderer = DocumentRenderer(stub_client, view=InspectorView())

    rendered = await renderer.render(build_document("<u-c>$stETH.balanceOf($unstETH).18</u-c>"))

    assert '<span class="urpc-value">1.5</span>' in rendered.rendered_text
    assert f"<b>contract</b>: stETH ({STETH})" in rendered.rendered_text


@pytest.mark.asyncio
async def test_custom_tag_prefix(stub_transport):
    config = URPCConfig(tag_prefix="x")
    renderer = DocumentRenderer(URPCClient(RPC_URL, transport=stub_transport, config=config))
    document = (
        "<x-url>http://node</x-url>"
        f"<x-directory><var>stETH:{STETH}</var><var>totalSupply():{TOTAL_SUPPLY}</var></x-directory>"
        "<p><x-c>$stETH.totalSupply().18</x-c> <u-c>untouched</u-c></p>"
    )

    rendered = await renderer.render(document)

    assert rendered.rendered_text == "<p>9,500,000 <u-c>untouched</u-c></p>"


@pytest.mark.asyncio
async def test_endpoint_from_document_used(stub_transport):
    """Test that calls go to the document's endpoint, not the client default"""
    renderer = DocumentRenderer(URPCClient("http://default", transport=stub_transport))

    await renderer.render(build_document("<u-c>$stETH.totalSupply().18</u-c>", url="https://node.example/rpc"))

    assert stub_transport.calls[0][0] == "https://node.example/rpc"


def test_render_sync(renderer):
    rendered = renderer.render_sync(build_document("<u-c>$stETH.totalSupply().18</u-c>"))

    assert rendered.rendered_text == "<html>\n<body>\n9,500,000\n</body>\n</html>"


def test_render_document_with_client(stub_client, stub_transport):
    document = build_document("<u-c>$stETH.balanceOf($stETH).18</u-c>")

    rendered = render_document(document, client=stub_client)

    assert "25,000" in rendered.rendered_text
    assert stub_transport.closed is False


def test_render_document_default_client(requests_mock):
    requests_mock.post(RPC_URL + "/", json=rpc_response(hex_result(15 * 10**17)))

    rendered = render_document(build_document("<u-c>$stETH.balanceOf($unstETH).18</u-c>"))

    assert "\n1.5\n" in rendered.rendered_text
    assert requests_mock.last_request.json()["params"][0]["data"] == _balance_calldata(UNSTETH)


def test_render_document_with_stub_transport():
    transport = StubTransport(default=hex_result(0))
    with URPCClient(transport=transport) as client:
        rendered = render_document(build_document("<u-c>$stETH.totalSupply().18</u-c>"), client=client)

    assert "\n0\n" in rendered.rendered_text
    assert transport.closed


@pytest.mark.asyncio
async def test_unformattable_result_isolated(stub_client, stub_transport):
    """Test that a result too wide to format only fails its own call site"""
    stub_transport.results[(STETH, TOTAL_SUPPLY)] = "0x" + "f" * 128
    renderer = DocumentRenderer(stub_client)
    body = (
        '<p><u-c key="wide">$stETH.totalSupply().$huge</u-c></p>\n'
        "<p><u-c>$stETH.balanceOf($stETH).0</u-c></p>"
    )
    entries = [("huge", "100000000000000000000"), ("stETH", STETH),
               ("balanceOf(address)", BALANCE_OF), ("totalSupply()", TOTAL_SUPPLY)]

    rendered = await renderer.render(build_document(body, entries=entries))

    assert "<p>Error in RPC call</p>" in rendered.rendered_text
    assert f"<p>{25_000 * 10**18:,}</p>" in rendered.rendered_text
    assert "Invalid decimals" in rendered.results_by_key["wide"].error


@pytest.mark.asyncio
async def test_multi_word_result_renders(stub_client, stub_transport):
    stub_transport.results[(STETH, TOTAL_SUPPLY)] = "0x" + "0" * 64 + hex_result(3 * 10**18)[2:]
    renderer = DocumentRenderer(stub_client)

    rendered = await renderer.render(build_document("<p><u-c>$stETH.totalSupply().18</u-c></p>"))

    assert "<p>3</p>" in rendered.rendered_text


@pytest.mark.asyncio
async def test_call_type_attribute(requests_mock):
    """Test that a block's type attribute selects the JSON-RPC method"""
    requests_mock.post(RPC_URL + "/", json=rpc_response(hex_result(21000)))
    body = '<p><u-c type="eth_estimateGas">$stETH.totalSupply()</u-c></p>'

    with URPCClient() as client:
        rendered = await DocumentRenderer(client).render(build_document(body))

    assert requests_mock.last_request.json()["method"] == "eth_estimateGas"
    assert rendered.results_by_key["$stETH.totalSupply()"].resolved.call_type == "eth_estimateGas"
    assert ("eth_estimateGas", STETH, "totalSupply()", "") in client.cache
    assert ("eth_call", STETH, "totalSupply()", "") not in client.cache


@pytest.mark.asyncio
async def test_call_types_cached_separately(stub_client, stub_transport):
    """Test that the same call under two types makes two requests"""
    body = '<u-c key="a">$stETH.totalSupply().18</u-c> <u-c key="b" type="eth_callAtLatest">$stETH.totalSupply().18</u-c>'

    rendered = await DocumentRenderer(stub_client).render(build_document(body))

    assert sorted(call[1] for call in stub_transport.calls) == ["eth_call", "eth_callAtLatest"]
    assert rendered.results_by_key["a"].display_value == "9,500,000"
    assert rendered.results_by_key["b"].display_value == "9,500,000"
