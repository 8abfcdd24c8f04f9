"""
Demo: Run the ignored Logger metadata check on the example worker module.
"""

from ilm.examples import build_example_worker_module, EXAMPLE_LOGGER_CONFIG
from ilm.config import load_params
from ilm.check import run_check
from ilm.backends import ReportFormat, generate_report
from ilm.serialization import ast_to_yaml


def main():
    module = build_example_worker_module()
    params = load_params(logger_config=EXAMPLE_LOGGER_CONFIG)

    print("=" * 70)
    print("IGNORED LOGGER METADATA DEMO")
    print("=" * 70)
    print()
    print(f"Allowed metadata keys: {', '.join(sorted(params.metadata_keys))}")
    print()

    issues = run_check("lib/my_app/worker.ex", module, params)

    print("TEXT REPORT")
    print("-" * 70)
    print(generate_report(issues, fmt=ReportFormat.TEXT))
    print()

    print("JSON REPORT")
    print("-" * 70)
    print(generate_report(issues, fmt=ReportFormat.JSON))
    print()

    print("SERIALIZED AST (first lines)")
    print("-" * 70)
    print("\n".join(ast_to_yaml(module).splitlines()[:20]))


if __name__ == "__main__":
    main()
