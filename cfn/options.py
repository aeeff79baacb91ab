#!/usr/bin/env python3
"""
Option model for CloudFormation stack requests.

A flat options mapping is split into AWS connection settings (AuthParams)
and stack settings (StackOptions). Stack settings are turned into the
keyword arguments CloudFormation's CreateStack/UpdateStack expect.
"""
import os
from dataclasses import dataclass, field
from typing import Optional


AUTH_OPTIONS = ('region', 'access_key_id', 'secret_access_key', 'profile')

# Option name -> CloudFormation request field
OPTION_FIELDS = {
    'stack_name': 'StackName',
    'template_body': 'TemplateBody',
    'template_url': 'TemplateURL',
    'parameters': 'Parameters',
    'tags': 'Tags',
    'capabilities': 'Capabilities',
    'resource_types': 'ResourceTypes',
    'role_arn': 'RoleARN',
    'stack_policy_body': 'StackPolicyBody',
    'stack_policy_url': 'StackPolicyURL',
    'notification_arns': 'NotificationARNs',
    'timeout_in_minutes': 'TimeoutInMinutes',
    'disable_rollback': 'DisableRollback',
    'rollback_configuration': 'RollbackConfiguration',
    'on_failure': 'OnFailure',
    'enable_termination_protection': 'EnableTerminationProtection',
    'client_request_token': 'ClientRequestToken',
}

FILE_PREFIX = 'file://'

# Accepted by CreateStack only; botocore rejects them for UpdateStack
CREATE_ONLY_FIELDS = ('TimeoutInMinutes', 'OnFailure', 'EnableTerminationProtection')


@dataclass(frozen=True)
class AuthParams:
    region: Optional[str] = None
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    profile: Optional[str] = None


@dataclass(frozen=True)
class StackOptions:
    """Stack settings keyed by option name, None values already dropped."""
    values: dict = field(default_factory=dict)

    @property
    def stack_name(self):
        return self.values.get('stack_name')

    @property
    def template_body(self):
        return self.values.get('template_body')

    @property
    def template_url(self):
        return self.values.get('template_url')


def resolve_template_body(value, base_dir=None):
    """
    Return the template text for a template_body option.

    A 'file://<path>' value is read from disk (relative paths are resolved
    against base_dir, the working directory by default); anything else is
    already inline template text.
    """
    if not isinstance(value, str) or not value.startswith(FILE_PREFIX):
        return value

    path = value[len(FILE_PREFIX):]
    if not os.path.isabs(path):
        path = os.path.join(base_dir or os.getcwd(), path)
    if not os.path.isfile(path):
        raise ValueError(f"Template file '{path}' does not exist")
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def split_options(raw, base_dir=None):
    """
    Build AuthParams and StackOptions from the same raw options mapping.

    The input is left untouched. Options that are not known are a
    configuration error, unless their value is None. A 'file://'
    template_body is replaced by the file contents.

    Returns:
        (AuthParams, StackOptions)
    """
    auth = AuthParams(**{name: raw.get(name) for name in AUTH_OPTIONS})

    stack_values = {}
    unknown = []
    for name, value in raw.items():
        if name in AUTH_OPTIONS or value is None:
            continue
        if name not in OPTION_FIELDS:
            unknown.append(name)
            continue
        if name == 'template_body':
            value = resolve_template_body(value, base_dir)
        stack_values[name] = value

    if unknown:
        raise ValueError(f"Unknown stack option(s): {', '.join(sorted(unknown))}")

    return auth, StackOptions(stack_values)


def hash_to_records(mapping, key_field='Key', value_field='Value'):
    """
    Convert {name: value} into [{key_field: name, value_field: value}, ...].

    Order follows the mapping; entries with a None value are skipped.
    """
    return [
        {key_field: key, value_field: value}
        for key, value in mapping.items()
        if value is not None
    ]


def build_request(options):
    """
    Derive the CreateStack request payload from StackOptions.
    """
    request = {}
    for name, value in options.values.items():
        if name == 'parameters':
            value = hash_to_records(value, 'ParameterKey', 'ParameterValue')
        elif name == 'tags':
            value = hash_to_records(value)
        request[OPTION_FIELDS[name]] = value
    return request


def update_request(request):
    """Return a copy of a CreateStack payload suitable for UpdateStack."""
    return {key: value for key, value in request.items() if key not in CREATE_ONLY_FIELDS}
