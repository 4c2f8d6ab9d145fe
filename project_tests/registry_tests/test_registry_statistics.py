#!/usr/bin/env python3
"""
Statistics tests for the module registry.
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

from module_registry import DependencyNotFoundError, ModuleConfig
from module_registry.statistics import estimate_memory_usage
from registry_helpers import (
    conditional_module,
    core_module,
    feature_module,
    make_registry,
    reporting_module,
)


def test_empty_registry_statistics():
    stats = make_registry().get_statistics()

    assert stats.total == 0
    assert stats.enabled == 0
    assert stats.disabled == 0
    assert stats.errors == 0
    assert stats.by_category == {}
    assert stats.total_memory_usage == 0
    assert stats.average_load_time == 0.0
    print("  ✅ Empty registry reports zeros")


def test_counts_and_categories():
    """Each module lands in exactly one of enabled, disabled or errors."""
    print("🧪 Testing statistics counts...")

    registry = make_registry()
    registry.register(core_module())
    registry.register(feature_module())
    registry.register(conditional_module())
    registry.register(reporting_module())
    registry.register(ModuleConfig(name='uncategorised', version='0.1.0'))
    try:
        registry.register(core_module(name='orphan', dependencies=['ghost'], category='integration'))
    except DependencyNotFoundError:
        pass

    registry.disable('conditional-module')

    stats = registry.get_statistics()
    assert stats.total == 6
    assert stats.enabled == 3
    assert stats.disabled == 2
    assert stats.errors == 1
    assert stats.enabled + stats.disabled + stats.errors == stats.total

    assert stats.by_category == {'core': 1, 'feature': 3, 'unknown': 1, 'integration': 1}
    assert stats.by_status == {'loaded': 4, 'disabled': 1, 'error': 1}

    print("  ✅ Counts partition the registry")


def test_memory_estimate():
    """The memory estimate is a fixed function of the declared items."""
    print("🧪 Testing memory estimate...")

    config = core_module()
    # 1 route, 2 components, 1 service, no dependencies
    assert estimate_memory_usage(config) == 1024 + 512 + 2 * 2048 + 4096

    bare = ModuleConfig(name='bare', version='1.0.0')
    assert estimate_memory_usage(bare) == 1024

    registry = make_registry()
    registry.register(config)
    registry.register(feature_module())

    stats = registry.get_statistics()
    expected = estimate_memory_usage(config) + estimate_memory_usage(feature_module())
    assert stats.total_memory_usage == expected

    print("  ✅ Memory estimate is deterministic")


def test_average_load_time():
    registry = make_registry()
    registry.register(core_module())
    registry.register(feature_module())

    load_times = [m.metrics.load_time for m in registry.get_all_modules()]
    stats = registry.get_statistics()
    assert abs(stats.average_load_time - sum(load_times) / len(load_times)) < 1e-9
    assert stats.average_load_time >= 0
    print("  ✅ Average load time computed over all modules")


def test_statistics_to_dict():
    registry = make_registry()
    registry.register(core_module())

    data = registry.get_statistics().to_dict()
    assert data['total'] == 1
    assert data['enabled'] == 1
    assert data['by_category'] == {'core': 1}
    assert set(data) >= {'total', 'enabled', 'disabled', 'errors', 'by_category',
                         'total_memory_usage', 'average_load_time'}
    print("  ✅ Statistics serialise to a plain dict")


def main():
    """Run all statistics tests."""
    print("🚀 Module Registry Statistics Tests")
    print("=" * 50)

    try:
        test_empty_registry_statistics()
        test_counts_and_categories()
        test_memory_estimate()
        test_average_load_time()
        test_statistics_to_dict()

        print("\n" + "=" * 50)
        print("🎉 All statistics tests passed!")

    except Exception as e:
        print(f"\n❌ Test failed: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
