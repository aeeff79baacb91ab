#!/usr/bin/env python3
"""
Run a CloudFormation deployment against mock boto3, twice.
Validates that the first run creates the stack and the second run is a no-op update.
Usage (from repo root):
  python run_deploy_mock.py [config_file]
Default config: examples/s3-cloudfront/deploy.yaml
"""
import os
import sys

# Repo root
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from unittest.mock import patch

from cfn.config import load_config
from cfn.main import deploy
from cfn.mock_boto3 import MockSession, MockCloudFormationClient

# Resolve config path
config_path = sys.argv[1] if len(sys.argv) > 1 else os.path.join(os.path.dirname(__file__), "examples", "s3-cloudfront", "deploy.yaml")
if not os.path.isabs(config_path):
    config_path = os.path.join(os.path.dirname(__file__), config_path)


def _print_state(mock_session, label=""):
    cfn = MockCloudFormationClient(mock_session._cloudformation_state)
    stacks = {name: stack["StackStatus"] for name, stack in cfn.stacks.items()}
    print(f"  {label}Stacks: {stacks}")
    print(f"  {label}Waits: {cfn.waits}")
    return stacks, list(cfn.waits)


def run_mock(config_path):
    """Run create + no-op update with mock boto3."""
    options = load_config(config_path)
    mock_session = MockSession(profile_name=options.get("profile"), region_name=options.get("region"))

    print("\n" + "=" * 60)
    print("PHASE 1: CREATE")
    print("=" * 60)
    with patch("cfn.client.boto3.Session", return_value=mock_session):
        deploy(options)

    print("\n[After create] State:")
    stacks, waits = _print_state(mock_session)
    if stacks.get(options["stack_name"]) != "CREATE_COMPLETE":
        print("ERROR: Stack not created")
        sys.exit(1)

    print("\n" + "=" * 60)
    print("PHASE 2: UPDATE (unchanged)")
    print("=" * 60)
    with patch("cfn.client.boto3.Session", return_value=mock_session):
        deploy(options)

    print("\n[After update] State:")
    _, waits_after_update = _print_state(mock_session)

    if waits_after_update != waits:
        print("\nERROR: Unchanged stack should not wait for an update")
        sys.exit(1)

    print("\n" + "=" * 60)
    print("OK: Create + unchanged update completed.")
    print("=" * 60)


def main():
    if not os.path.exists(config_path):
        print(f"Error: Config file not found: {config_path}")
        sys.exit(1)
    run_mock(config_path)


if __name__ == "__main__":
    main()
