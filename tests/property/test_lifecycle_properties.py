"""
Property-Based Tests for the Plugin Lifecycle

Tests that any sequence of lifecycle calls follows the state machine
UNINITIALIZED -> INITIALIZED -> DISPOSED using Hypothesis.
"""

import asyncio

import pytest
from hypothesis import given, settings, strategies as st

from src.core.plugin_interfaces import BasePlugin, LifecycleViolation, PluginMetadata, PluginState
from tests.utils import RecordingEndpointBuilder, RecordingHost, RecordingRegistry


OPERATIONS = ('initialize', 'configure_services', 'configure_endpoints', 'dispose')


class HookCountingPlugin(BasePlugin):
    """Plugin that only counts hook invocations"""

    def __init__(self):
        self.calls = {operation: 0 for operation in OPERATIONS}
        super().__init__()

    def get_metadata(self) -> PluginMetadata:
        return PluginMetadata(id="lifecycle-plugin", name="Lifecycle", version="1.0.0",
                              description="Counts lifecycle hooks")

    async def on_initialize(self, host):
        self.calls['initialize'] += 1

    def on_configure_services(self, registry):
        self.calls['configure_services'] += 1

    def on_configure_endpoints(self, builder):
        self.calls['configure_endpoints'] += 1

    async def on_dispose(self):
        self.calls['dispose'] += 1


def expected_outcome(state: PluginState, operation: str):
    """Next state for an operation, or None if it must be rejected"""
    if operation == 'dispose':
        return PluginState.DISPOSED
    if operation == 'initialize':
        return PluginState.INITIALIZED if state == PluginState.UNINITIALIZED else None
    return state if state == PluginState.INITIALIZED else None


async def invoke(plugin: BasePlugin, operation: str):
    if operation == 'initialize':
        await plugin.initialize(RecordingHost())
    elif operation == 'configure_services':
        plugin.configure_services(RecordingRegistry())
    elif operation == 'configure_endpoints':
        plugin.configure_endpoints(RecordingEndpointBuilder())
    else:
        await plugin.dispose()


class TestLifecycleProperties:
    """
    Property: every call either follows the state machine or raises
    LifecycleViolation without running the hook or changing state.
    """

    @settings(max_examples=200, deadline=5000)
    @given(sequence=st.lists(st.sampled_from(OPERATIONS), max_size=12))
    def test_any_call_sequence_follows_state_machine(self, sequence):
        plugin = HookCountingPlugin()

        async def run():
            for operation in sequence:
                state = plugin.state
                calls = dict(plugin.calls)
                next_state = expected_outcome(state, operation)

                if next_state is None:
                    with pytest.raises(LifecycleViolation) as exc_info:
                        await invoke(plugin, operation)
                    assert exc_info.value.operation == operation
                    assert exc_info.value.state == state
                    assert plugin.state == state
                    assert plugin.calls == calls
                else:
                    await invoke(plugin, operation)
                    assert plugin.state == next_state

        asyncio.run(run())

        assert plugin.calls['initialize'] <= 1
        assert plugin.calls['dispose'] <= 1

    @settings(max_examples=100, deadline=5000)
    @given(sequence=st.lists(st.sampled_from(OPERATIONS), max_size=8))
    def test_disposed_plugin_stays_disposed(self, sequence):
        plugin = HookCountingPlugin()

        async def run():
            await plugin.initialize(RecordingHost())
            await plugin.dispose()
            for operation in sequence:
                try:
                    await invoke(plugin, operation)
                except LifecycleViolation:
                    pass
                assert plugin.state == PluginState.DISPOSED

        asyncio.run(run())

        assert plugin.calls['dispose'] == 1
