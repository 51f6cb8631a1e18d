import asyncio
import threading

import pytest

from sentrywallet.gate import DASHBOARD_PATH, NavigationGate
from sentrywallet.session import AuthEventSubscriber, SessionBootstrapper, activate_login_view

from tests.conftest import FakeAddressBar, FakeAuthService, FakeRouter


# ─── SessionBootstrapper ─────────────────────────────────────────────────────

@pytest.mark.anyio
async def test_probe_with_session_navigates(gate, router) -> None:
    service = FakeAuthService(session="session-1")
    assert await SessionBootstrapper(service, gate).run() is True
    assert router.paths == [DASHBOARD_PATH]


@pytest.mark.anyio
async def test_probe_without_session_stays_on_login(gate, router) -> None:
    service = FakeAuthService(session=None)
    assert await SessionBootstrapper(service, gate).run() is False
    assert router.paths == []


@pytest.mark.anyio
async def test_failed_probe_is_treated_as_signed_out(gate, router) -> None:
    service = FakeAuthService(session=ConnectionError("auth service unreachable"))
    assert await SessionBootstrapper(service, gate).run() is False
    assert router.paths == []
    assert gate.fired is False


# ─── AuthEventSubscriber ─────────────────────────────────────────────────────

def test_signed_in_event_navigates(service, gate, router) -> None:
    with AuthEventSubscriber(service, gate):
        service.emit("SIGNED_IN", "session-1")
    assert router.paths == [DASHBOARD_PATH]


@pytest.mark.parametrize(
    "event, session",
    [
        ("SIGNED_OUT", None),
        ("TOKEN_REFRESHED", "session-1"),
        ("USER_UPDATED", "session-1"),
        ("SIGNED_IN", None),
    ],
)
def test_other_events_are_ignored(service, gate, router, event, session) -> None:
    with AuthEventSubscriber(service, gate):
        service.emit(event, session)
    assert router.paths == []


def test_close_unsubscribes_once(service, gate) -> None:
    subscriber = AuthEventSubscriber(service, gate)
    subscriber.open()
    subscriber.open()
    subscriber.close()
    subscriber.close()

    assert len(service.subscriptions) == 1
    assert service.subscriptions[0].unsubscribed == 1


def test_event_after_teardown_does_not_navigate(service, gate, router) -> None:
    with AuthEventSubscriber(service, gate):
        pass
    service.emit("SIGNED_IN", "session-1")
    assert router.paths == []


@pytest.mark.anyio
async def test_event_from_worker_thread_runs_on_loop(service, router, address_bar) -> None:
    loop_thread = threading.get_ident()
    seen_threads = []

    class ThreadRecordingRouter(FakeRouter):
        def navigate(self, path):
            seen_threads.append(threading.get_ident())
            super().navigate(path)

    gate = NavigationGate(ThreadRecordingRouter(), address_bar)
    with AuthEventSubscriber(service, gate):
        worker = threading.Thread(target=service.emit, args=("SIGNED_IN", "session-1"))
        worker.start()
        worker.join()
        for _ in range(10):
            await asyncio.sleep(0)
            if seen_threads:
                break

    assert seen_threads == [loop_thread]


@pytest.mark.anyio
async def test_event_queued_before_teardown_is_dropped(service, gate, router) -> None:
    subscriber = AuthEventSubscriber(service, gate)
    subscriber.open()
    worker = threading.Thread(target=service.emit, args=("SIGNED_IN", "session-1"))
    worker.start()
    worker.join()
    subscriber.close()
    await asyncio.sleep(0)
    await asyncio.sleep(0)

    assert router.paths == []


# ─── Probe / event race ──────────────────────────────────────────────────────

@pytest.mark.anyio
@pytest.mark.parametrize("order", ["probe_first", "event_first", "event_only", "probe_only"])
async def test_navigation_happens_once_whatever_the_order(order) -> None:
    probe_session = None if order == "event_only" else "session-1"
    service = FakeAuthService(session=probe_session)
    service.probe_release = asyncio.Event()
    router = FakeRouter()
    bar = FakeAddressBar(has_fragment=True)
    gate = NavigationGate(router, bar)

    with AuthEventSubscriber(service, gate):
        probe = asyncio.create_task(SessionBootstrapper(service, gate).run())
        await asyncio.sleep(0)
        if order == "probe_first":
            service.probe_release.set()
            await probe
            service.emit("SIGNED_IN", "session-1")
        elif order == "probe_only":
            service.probe_release.set()
            await probe
        else:
            service.emit("SIGNED_IN", "session-1")
            service.probe_release.set()
            await probe

    assert router.paths == [DASHBOARD_PATH]
    assert bar.strip_count == 1


# ─── activate_login_view ─────────────────────────────────────────────────────

@pytest.mark.anyio
async def test_activation_with_existing_session_fires_gate(router, address_bar) -> None:
    service = FakeAuthService(session="session-1")
    async with activate_login_view(service, router, address_bar) as gate:
        assert gate.fired is True
    assert router.paths == [DASHBOARD_PATH]


@pytest.mark.anyio
async def test_activation_releases_subscription_on_error(service, router, address_bar) -> None:
    with pytest.raises(RuntimeError):
        async with activate_login_view(service, router, address_bar):
            assert service.subscriptions[0].unsubscribed == 0
            raise RuntimeError("view crashed")
    assert service.subscriptions[0].unsubscribed == 1


@pytest.mark.anyio
async def test_activation_binds_gate_to_controllers(service, router, address_bar) -> None:
    class Controller:
        gate = None

    controller = Controller()
    async with activate_login_view(service, router, address_bar, controllers=[controller]) as gate:
        assert controller.gate is gate
    assert controller.gate is None


@pytest.mark.anyio
async def test_event_after_activation_ends_does_not_navigate(service, router, address_bar) -> None:
    async with activate_login_view(service, router, address_bar) as gate:
        assert gate.fired is False
    service.emit("SIGNED_IN", "session-1")
    assert router.paths == []


@pytest.mark.anyio
async def test_each_activation_gets_a_fresh_latch(router, address_bar) -> None:
    service = FakeAuthService(session="session-1")
    async with activate_login_view(service, router, address_bar):
        pass
    async with activate_login_view(service, router, address_bar):
        pass
    assert router.paths == [DASHBOARD_PATH, DASHBOARD_PATH]
