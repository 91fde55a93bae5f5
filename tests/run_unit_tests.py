"""Lightweight test runner for factcurves.

Runs every test_*.py module in this directory without pytest: each module is
loaded with importlib and every callable named test_* is called with no
arguments. The project root is put on sys.path so an uninstalled checkout works.

Exit codes:
 0 - all tests passed
 1 - one or more tests failed

Usage:
  python tests/run_unit_tests.py [name_filter]
"""
import os
import sys
import importlib.util
import traceback
from types import ModuleType

TEST_PREFIX = 'test_'
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, os.path.dirname(BASE_DIR))


def discover_test_files():
    for fname in sorted(os.listdir(BASE_DIR)):
        if fname.startswith(TEST_PREFIX) and fname.endswith('.py'):
            yield os.path.join(BASE_DIR, fname)


def load_module(path: str) -> ModuleType:
    spec = importlib.util.spec_from_file_location(os.path.splitext(os.path.basename(path))[0], path)
    module = importlib.util.module_from_spec(spec)
    assert spec.loader is not None
    spec.loader.exec_module(module)
    return module


def run_tests_in_module(module: ModuleType, name_filter: str = ''):
    results = []
    for name in sorted(dir(module)):
        if not name.startswith(TEST_PREFIX) or name_filter not in name:
            continue
        obj = getattr(module, name)
        if not callable(obj):
            continue
        try:
            obj()
            results.append((name, True, None))
        except AssertionError as e:
            results.append((name, False, f'AssertionError: {e}\n{traceback.format_exc()}'))
        except Exception as e:  # noqa
            results.append((name, False, f'Exception: {e}\n{traceback.format_exc()}'))
    return results


def main():
    name_filter = sys.argv[1] if len(sys.argv) > 1 else ''
    all_results = []
    for test_file in discover_test_files():
        module = load_module(test_file)
        all_results.extend((os.path.basename(test_file),) + r for r in run_tests_in_module(module, name_filter))

    passed = sum(1 for r in all_results if r[2])
    failed = [r for r in all_results if not r[2]]

    print("\nTest Results Summary")
    print("=====================")
    for file_name, test_name, ok, err in all_results:
        status = 'PASS' if ok else 'FAIL'
        print(f"{status:<5} {file_name}:{test_name}")
        if err:
            print(f"       -> {err}")

    print(f"\nTotals: PASS={passed} FAIL={len(failed)}")
    sys.exit(1 if failed else 0)


if __name__ == '__main__':
    main()
