#!/usr/bin/env python3
"""
Configuration loading and validation for CloudFormation stack deployments.
"""
import os
import sys
import yaml

from .options import AUTH_OPTIONS, OPTION_FIELDS, resolve_template_body


def _stringify_parameters(parameters):
    """CloudFormation parameter values are strings; YAML may give ints or bools."""
    result = {}
    for key, value in parameters.items():
        if value is None or isinstance(value, str):
            result[key] = value
        elif isinstance(value, bool):
            result[key] = 'true' if value else 'false'
        elif isinstance(value, (list, tuple)):
            result[key] = ','.join(str(v) for v in value)
        else:
            result[key] = str(value)
    return result


def load_config(config_file):
    """
    Load configuration from YAML file for a CloudFormation deployment.

    Returns the flat options mapping CfnClient accepts.
    """
    if not os.path.exists(config_file):
        print(f"Error: Config file not found: {config_file}")
        sys.exit(1)

    try:
        with open(config_file, 'r') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        print(f"Error loading configuration: {str(e)}")
        sys.exit(1)

    if not config:
        print("Error: Config file is empty")
        sys.exit(1)

    if not isinstance(config, dict):
        print("Error: Config file must be a mapping with 'aws' and 'stack' sections")
        sys.exit(1)

    aws_config = config.get('aws') or {}
    stack_config = config.get('stack') or {}

    # Validate AWS configuration
    if 'region' not in aws_config:
        print("Error: 'region' must be specified in the AWS configuration")
        sys.exit(1)

    unknown = [name for name in aws_config if name not in AUTH_OPTIONS]
    if unknown:
        print(f"Error: Unknown AWS option(s): {', '.join(sorted(unknown))}")
        sys.exit(1)

    # Validate stack configuration
    if 'stack_name' not in stack_config:
        print("Error: 'stack_name' must be specified in the stack configuration")
        sys.exit(1)

    if not stack_config.get('template_body') and not stack_config.get('template_url'):
        print("Error: either 'template_body' or 'template_url' must be specified in the stack configuration")
        sys.exit(1)

    unknown = [name for name in stack_config if name not in OPTION_FIELDS]
    if unknown:
        print(f"Error: Unknown stack option(s): {', '.join(sorted(unknown))}")
        sys.exit(1)

    for name in ('parameters', 'tags'):
        if name in stack_config and not isinstance(stack_config[name] or {}, dict):
            print(f"Error: '{name}' must be a mapping of name to value")
            sys.exit(1)

    config_dir = os.path.dirname(os.path.abspath(config_file))
    result = dict(aws_config)
    result.update(stack_config)

    try:
        result['template_body'] = resolve_template_body(stack_config.get('template_body'), config_dir)
    except ValueError as e:
        print(f"Error: {str(e)}")
        sys.exit(1)

    if stack_config.get('parameters'):
        result['parameters'] = _stringify_parameters(stack_config['parameters'])
    if stack_config.get('tags'):
        result['tags'] = _stringify_parameters(stack_config['tags'])

    return result
