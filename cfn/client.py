#!/usr/bin/env python3
"""
CloudFormation stack deployment client.

Wraps a boto3 CloudFormation client: validates the template, checks whether
the stack exists, creates or updates it and waits for completion, and
reads the stack outputs.
"""
import boto3
from botocore.exceptions import ClientError

from .options import split_options, build_request, update_request


API_VERSION = '2010-05-15'

STACK_MISSING_SUFFIX = 'does not exist'
NO_UPDATES_MESSAGE = 'No updates are to be performed'


def error_message(error):
    """
    Message text of an AWS error.

    CloudFormation reports both a missing stack and an unchanged stack with
    the generic ValidationError code, so callers have to match on the text.
    """
    if isinstance(error, ClientError):
        message = error.response.get('Error', {}).get('Message')
        if message:
            return message
    return str(error)


class CfnClient:
    """Create or update a single CloudFormation stack from flat options."""

    def __init__(self, options):
        """
        Args:
            options: Flat mapping with AWS settings (region, access_key_id,
                secret_access_key, profile) and stack options (stack_name,
                template_body, parameters, tags, ...).
        """
        self.auth, stack_options = split_options(options)

        if self.auth.profile:
            # Credentials come from the named profile
            session = boto3.Session(profile_name=self.auth.profile, region_name=self.auth.region)
        else:
            session = boto3.Session(
                aws_access_key_id=self.auth.access_key_id,
                aws_secret_access_key=self.auth.secret_access_key,
                region_name=self.auth.region,
            )

        self.set_options(stack_options)
        self.aws_client = session.client('cloudformation', api_version=API_VERSION)

    def set_options(self, options):
        """Store stack options and the request payload derived from them."""
        self.options = options
        self.request = build_request(options)

    @property
    def stack_name(self):
        return self.options.stack_name

    def validate_template(self):
        """
        Validate the configured template body or URL.
        Raises ClientError if CloudFormation rejects the template.
        """
        kwargs = {}
        if self.options.template_body is not None:
            kwargs['TemplateBody'] = self.options.template_body
        if self.options.template_url is not None:
            kwargs['TemplateURL'] = self.options.template_url
        return self.aws_client.validate_template(**kwargs)

    def stack_exists(self):
        try:
            self.aws_client.describe_stacks(StackName=self.stack_name)
        except ClientError as e:
            if error_message(e).endswith(STACK_MISSING_SUFFIX):
                return False
            raise
        return True

    def create_stack(self):
        print(f"Creating new CloudFormation stack '{self.stack_name}'...")
        self.aws_client.create_stack(**self.request)
        self.aws_client.get_waiter('stack_create_complete').wait(StackName=self.stack_name)
        print(f"New CloudFormation stack '{self.stack_name}' has been created!")

    def update_stack(self):
        """
        Update the stack and wait for completion.
        An update with no changes is not an error.
        """
        print(f"Updating CloudFormation stack '{self.stack_name}'...")
        try:
            self.aws_client.update_stack(**update_request(self.request))
        except ClientError as e:
            if NO_UPDATES_MESSAGE not in error_message(e):
                raise
            print(f"No updates are to be performed to CloudFormation stack '{self.stack_name}'")
            return
        self.aws_client.get_waiter('stack_update_complete').wait(StackName=self.stack_name)
        print(f"CloudFormation stack '{self.stack_name}' has been updated!")

    def create_or_update_stack(self):
        """Update the stack if it exists, create it otherwise."""
        if self.stack_exists():
            return self.update_stack()
        return self.create_stack()

    def fetch_outputs(self):
        """
        Return stack outputs as {OutputKey: OutputValue}.
        """
        response = self.aws_client.describe_stacks(StackName=self.stack_name)
        stacks = response.get('Stacks', [])
        outputs = stacks[0].get('Outputs', []) if stacks else []
        return {output['OutputKey']: output['OutputValue'] for output in outputs}
