#!/usr/bin/env python3
"""
CLI entry point for CloudFormation stack deployment.

Reads a YAML config, validates the template, creates or updates the stack
and prints its outputs.
"""
import argparse
import sys

from botocore.exceptions import BotoCoreError, ClientError

from . import config
from .client import CfnClient


def print_outputs(outputs):
    if not outputs:
        print("Stack has no outputs")
        return
    for key, value in outputs.items():
        print(f"{key}: {value}")


def deploy(options, validate_only=False, outputs_only=False):
    """
    Run the deployment for a flat options mapping.

    Args:
        options: Options as returned by config.load_config
        validate_only: Only validate the template
        outputs_only: Only print outputs of the existing stack
    """
    try:
        client = CfnClient(options)
    except (ValueError, BotoCoreError) as e:
        print(f"Error: {str(e)}", file=sys.stderr)
        sys.exit(1)

    try:
        if outputs_only:
            print_outputs(client.fetch_outputs())
            return

        print(f"Validating template for stack '{client.stack_name}'...")
        client.validate_template()
        print("Template is valid")
        if validate_only:
            return

        client.create_or_update_stack()
        print_outputs(client.fetch_outputs())
        print("Deploy complete.")
    except (ClientError, BotoCoreError) as e:
        print(f"Error: {str(e)}", file=sys.stderr)
        sys.exit(1)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Create or update a CloudFormation stack from a YAML config")
    parser.add_argument("--config", "-c", default="deploy.yaml", help="Path to YAML config")
    parser.add_argument("--stack-name", help="CloudFormation stack name (default: from config)")
    parser.add_argument("--validate-only", action="store_true", help="Only validate the template; do not deploy")
    parser.add_argument("--outputs", action="store_true", help="Only print outputs of the existing stack")
    args = parser.parse_args(argv)

    options = config.load_config(args.config)
    if args.stack_name:
        options['stack_name'] = args.stack_name

    deploy(options, validate_only=args.validate_only, outputs_only=args.outputs)


if __name__ == "__main__":
    main()
