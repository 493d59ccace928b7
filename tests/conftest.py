import pytest

from ssrp_discovery.client import SSRPClient
from ssrp_discovery.protocol.decoder import encode_payload, encode_response
from ssrp_discovery.protocol.schema import Datagram, SqlInstance

AGENT_ADDRESS = ("192.0.2.10", 1434)


class FakeClock:
    def __init__(self, now: float = 100.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeTransport:
    """
    In-memory transport. Each scripted response is either the bytes of a
    datagram, None for a receive that times out, or an exception to raise.
    Once the script runs out every receive times out.
    """

    def __init__(self, clock, responses=(), send_error=None):
        self.clock = clock
        self.responses = list(responses)
        self.send_error = send_error
        self.sent = []
        self.receive_timeouts = []
        self.releases = 0
        self.is_open = False

    def send_broadcast(self, payload):
        self.is_open = True
        if self.send_error is not None:
            raise self.send_error
        self.sent.append(payload)

    def receive(self, timeout):
        assert self.is_open
        self.receive_timeouts.append(timeout)
        item = self.responses.pop(0) if self.responses else None
        if item is None:
            self.clock.advance(timeout)
            return None
        if isinstance(item, Exception):
            raise item
        self.clock.advance(0.01)
        return Datagram(data=item, address=AGENT_ADDRESS)

    def close(self):
        if self.is_open:
            self.is_open = False
            self.releases += 1


def response(*instances):
    return encode_response(encode_payload(instances))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def express():
    return SqlInstance(
        server_name="HOST1",
        instance_name="SQLEXPRESS",
        is_clustered=False,
        version="15.0.2000.5",
    )


@pytest.fixture
def clustered():
    return SqlInstance(
        server_name="CLUSTER1",
        instance_name="PROD",
        is_clustered=True,
        version="16.0.1000.6",
    )


@pytest.fixture
def make_client(clock):
    """
    Builds a client whose scans run on fake transports. Every scan takes
    the next transport from ``transports``.
    """
    def factory(*transports, **kwargs):
        pending = list(transports)
        client = SSRPClient(
            transport_factory=lambda config: pending.pop(0),
            clock=clock,
            **kwargs,
        )
        return client
    return factory
