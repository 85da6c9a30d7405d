"""
Pytest fixtures for the urpc SDK tests.
"""
import pytest

from urpc_sdk import URPCClient, SymbolDirectory, StubTransport, DocumentRenderer
from urpc_sdk._rate_limited_log import reset_rate_limits

from tests.test_helpers import RPC_URL, STETH, UNSTETH, BALANCE_OF, TOTAL_SUPPLY, DIRECTORY_ENTRIES, hex_result


@pytest.fixture(autouse=True)
def _reset_rate_limited_log():
    """Every test starts with no suppressed log messages."""
    reset_rate_limits()
    yield
    reset_rate_limits()


@pytest.fixture
def directory():
    """Directory with the stETH contracts and selectors used in the docs"""
    return SymbolDirectory.load(DIRECTORY_ENTRIES)


@pytest.fixture
def stub_transport():
    """
    Stub answering balanceOf/totalSupply on stETH.

    balanceOf(stETH) is 25,000 stETH, balanceOf(unstETH) is 1.5 stETH and
    totalSupply is 9.5M stETH, all with 18 decimals.
    """
    return StubTransport(results={
        (STETH, BALANCE_OF + "0" * 24 + STETH[2:]): hex_result(25_000 * 10**18),
        (STETH, BALANCE_OF + "0" * 24 + UNSTETH[2:]): hex_result(15 * 10**17),
        (STETH, TOTAL_SUPPLY): hex_result(9_500_000 * 10**18),
    })


@pytest.fixture
def stub_client(stub_transport):
    """Client wired to the stub transport"""
    return URPCClient(RPC_URL, transport=stub_transport)


@pytest.fixture
def renderer(stub_client):
    """Renderer sharing the stub client's cache"""
    return DocumentRenderer(stub_client)
