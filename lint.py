#!/usr/bin/env python3
"""
Lint and test runner for stack-deployer.

Runs isort, black, flake8 and pytest in order and stops at the first
failing check.
"""

import subprocess
import sys
from typing import List, Tuple

CHECKS = [
    (["isort", "--check-only", "."], "Checking import order with isort"),
    (["black", "--check", "."], "Checking formatting with black"),
    (["flake8", "."], "Linting Python code with flake8"),
    (["pytest"], "Running tests with pytest"),
]


def run_command(command: List[str], description: str) -> Tuple[bool, str]:
    """
    Run a command and return its success status and combined output.

    Args:
        command: Command and arguments to execute
        description: Human-readable description of the check

    Returns:
        Tuple of (success: bool, output: str)
    """
    print(f"\n🔍 {description}...")
    print(f"   Running: {' '.join(command)}")

    try:
        result = subprocess.run(command, capture_output=True, text=True, check=False)
    except FileNotFoundError:
        error_msg = f"Command not found: {command[0]}"
        print(f"❌ {description} failed - {error_msg}")
        return False, error_msg

    output = (result.stdout.strip() + "\n" + result.stderr.strip()).strip()
    if result.returncode == 0:
        print(f"✅ {description} completed successfully!")
        return True, output

    print(f"❌ {description} failed!")
    print(f"   Error:\n{output}")
    return False, output


def main() -> int:
    print("🚀 Starting stack-deployer checks...")
    print("=" * 60)

    results = []
    for command, description in CHECKS:
        success, _ = run_command(command, description)
        results.append((description, success))
        if not success:
            print("\nStopping due to a failing check.")
            break

    print("\n" + "=" * 60)
    print("📊 SUMMARY:")
    for description, success in results:
        status = "✅ PASSED" if success else "❌ FAILED"
        print(f"   {status}: {description}")

    if all(success for _, success in results) and len(results) == len(CHECKS):
        print("\n🎉 All checks passed!")
        return 0
    print("\n⚠️  Some checks failed. Please review the output above.")
    return 1


if __name__ == "__main__":
    sys.exit(main())
