#!/usr/bin/env python3
"""
Event tests for the module registry.

Listeners run synchronously in registration order; a failing listener is
logged and neither stops the other listeners nor the registry operation.
"""

import sys
from pathlib import Path

# Fix Windows encoding issues
if sys.platform == "win32":
    import codecs
    sys.stdout = codecs.getwriter("utf-8")(sys.stdout.detach())
    sys.stderr = codecs.getwriter("utf-8")(sys.stderr.detach())

# Add the project root to the path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from module_registry import DependencyNotFoundError, ModuleEvent, RegistryEvent
from module_registry.events import EventBus
from registry_helpers import core_module, feature_module, make_registry


def test_registered_event_payload():
    """module:registered carries the module name and a config snapshot."""
    print("🧪 Testing registered event...")

    registry = make_registry()
    events = []
    registry.add_event_listener(RegistryEvent.MODULE_REGISTERED, events.append)

    registry.register(core_module())

    assert len(events) == 1
    event = events[0]
    assert isinstance(event, ModuleEvent)
    assert event.type == RegistryEvent.MODULE_REGISTERED
    assert event.module_name == 'core'
    assert event.data['name'] == 'core'
    assert event.data['version'] == '1.0.0'
    assert event.data['routes'] == ['/api/health']
    assert event.timestamp.tzinfo is not None

    # The payload is a snapshot, not the live config
    event.data['routes'].append('/api/tampered')
    assert registry.get_module('core').config.routes == ['/api/health']

    print("  ✅ Registered event delivered with snapshot")


def test_enable_disable_payloads():
    print("🧪 Testing enable/disable events...")

    registry = make_registry()
    registry.register(core_module())
    registry.register(feature_module())

    events = []
    registry.add_event_listener(RegistryEvent.MODULE_ENABLED, events.append)
    registry.add_event_listener(RegistryEvent.MODULE_DISABLED, events.append)

    registry.disable('feature-module')
    registry.enable('feature-module')

    disabled, enabled = events
    assert disabled.type == RegistryEvent.MODULE_DISABLED
    assert disabled.module_name == 'feature-module'
    assert disabled.data == {'version': '1.0.0', 'reason': 'manual'}

    assert enabled.type == RegistryEvent.MODULE_ENABLED
    assert enabled.data == {'version': '1.0.0', 'dependencies': ['core']}

    print("  ✅ Payloads carry version and context")


def test_listener_errors_are_isolated():
    """A throwing listener does not affect later listeners or the operation."""
    print("🧪 Testing listener error isolation...")

    registry = make_registry()
    calls = []

    def broken(event):
        calls.append('broken')
        raise RuntimeError("listener failure")

    def working(event):
        calls.append('working')

    registry.add_event_listener(RegistryEvent.MODULE_REGISTERED, broken)
    registry.add_event_listener(RegistryEvent.MODULE_REGISTERED, working)

    registry.register(core_module())

    assert calls == ['broken', 'working']
    assert registry.is_enabled('core')

    print("  ✅ Registration succeeded despite listener error")


def test_remove_listener():
    registry = make_registry()
    events = []

    registry.add_event_listener(RegistryEvent.MODULE_REGISTERED, events.append)
    assert registry.listener_count(RegistryEvent.MODULE_REGISTERED) == 1

    registry.remove_event_listener(RegistryEvent.MODULE_REGISTERED, events.append)
    assert registry.listener_count(RegistryEvent.MODULE_REGISTERED) == 0

    # Removing an unknown listener is a no-op
    registry.remove_event_listener(RegistryEvent.MODULE_REGISTERED, events.append)
    registry.remove_event_listener(RegistryEvent.MODULE_ENABLED, print)

    registry.register(core_module())
    assert events == []
    print("  ✅ Removed listeners are not called")


def test_string_event_types():
    """Event types may be given by their wire names."""
    registry = make_registry()
    events = []
    registry.add_event_listener('module:registered', events.append)

    registry.register(core_module())
    assert len(events) == 1
    assert events[0].type == RegistryEvent.MODULE_REGISTERED

    try:
        registry.add_event_listener('module:unknown', events.append)
    except ValueError:
        pass
    else:
        raise AssertionError("Unknown event type should be rejected")
    print("  ✅ String event types accepted")


def test_error_event():
    registry = make_registry()
    events = []
    registry.add_event_listener(RegistryEvent.MODULE_ERROR, events.append)

    try:
        registry.register(feature_module())
    except DependencyNotFoundError:
        pass

    assert len(events) == 1
    assert events[0].module_name == 'feature-module'
    assert events[0].data == {'error': "Dependency core not found for module feature-module"}
    print("  ✅ Error event emitted for failed registration")


def test_listener_can_query_registry():
    """Listeners may call back into the registry while an event is delivered."""
    registry = make_registry()
    seen = []

    def on_registered(event):
        seen.append(registry.is_enabled(event.module_name))

    registry.add_event_listener(RegistryEvent.MODULE_REGISTERED, on_registered)
    registry.register(core_module())

    assert seen == [True]
    print("  ✅ Re-entrant listener calls allowed")


def test_clear_announces_ready():
    """Clearing removes modules, keeps subscriptions and emits registry:ready once."""
    print("🧪 Testing clear...")

    registry = make_registry()
    registry.register(core_module())
    ready = []
    registered = []
    registry.add_event_listener(RegistryEvent.REGISTRY_READY, ready.append)
    registry.add_event_listener(RegistryEvent.MODULE_REGISTERED, registered.append)

    registry.clear()

    assert registry.get_all_modules() == []
    assert registry.get_dependents('core') == []
    assert len(ready) == 1
    assert ready[0].module_name is None
    assert ready[0].data == {'registry_version': '1.0.0'}

    # The same name can be registered again and listeners still fire
    registry.register(core_module())
    assert [e.module_name for e in registered] == ['core']
    assert registry.listener_count(RegistryEvent.MODULE_REGISTERED) == 1
    print("  ✅ Clear resets modules and notifies listeners")


def test_event_bus_directly():
    bus = EventBus()
    ready = []
    bus.add_listener(RegistryEvent.REGISTRY_READY, ready.append)

    event = bus.emit(RegistryEvent.REGISTRY_READY, data={'registry_version': '1.0.0'})

    assert ready == [event]
    assert event.module_name is None
    assert bus.emit(RegistryEvent.MODULE_ENABLED, 'core').type == RegistryEvent.MODULE_ENABLED
    print("  ✅ Event bus emits to matching listeners only")


def main():
    """Run all event tests."""
    print("🚀 Module Registry Event Tests")
    print("=" * 50)

    try:
        test_registered_event_payload()
        test_enable_disable_payloads()
        test_listener_errors_are_isolated()
        test_remove_listener()
        test_string_event_types()
        test_error_event()
        test_listener_can_query_registry()
        test_clear_announces_ready()
        test_event_bus_directly()

        print("\n" + "=" * 50)
        print("🎉 All event tests passed!")

    except Exception as e:
        print(f"\n❌ Test failed: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
