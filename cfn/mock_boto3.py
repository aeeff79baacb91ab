#!/usr/bin/env python3
"""
In-memory mock boto3 CloudFormation client with the same interface as the real one.
All state is stored in memory for testing without hitting AWS.
"""
from copy import deepcopy

from botocore.exceptions import ClientError, WaiterError


def _client_error(code, message="", operation="Operation"):
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


class MockWaiter:
    """Waiter that checks the stack reached the expected status once; records every wait."""

    STATUSES = {
        "stack_create_complete": "CREATE_COMPLETE",
        "stack_update_complete": "UPDATE_COMPLETE",
    }

    def __init__(self, client, name):
        self._client = client
        self.name = name

    def wait(self, StackName=None, WaiterConfig=None):
        self._client.waits.append((self.name, StackName))
        stack = self._client.stacks.get(StackName)
        expected = self.STATUSES[self.name]
        if stack is None or stack["StackStatus"] != expected:
            status = stack["StackStatus"] if stack else None
            raise WaiterError(
                name=self.name.title().replace("_", ""),
                reason=f"Waiter encountered a terminal failure state: stack status {status}",
                last_response={"Stacks": [deepcopy(stack)] if stack else []},
            )


class MockCloudFormationClient:
    """In-memory CloudFormation client. State: stacks dict by name."""

    def __init__(self, state=None):
        self._state = state if state is not None else {}
        self._state.setdefault("stacks", {})
        self._state.setdefault("calls", [])
        self._state.setdefault("waits", [])
        self._state.setdefault("errors", {})
        self._state.setdefault("requests", {})

    @property
    def state(self):
        return self._state

    @property
    def stacks(self):
        return self._state["stacks"]

    @property
    def calls(self):
        return self._state["calls"]

    @property
    def waits(self):
        return self._state["waits"]

    @property
    def requests(self):
        """Last request accepted per stack name."""
        return self._state["requests"]

    def _record(self, operation, kwargs):
        self.calls.append((operation, deepcopy(kwargs)))
        error = self._state["errors"].pop(operation, None)
        if error is not None:
            raise error

    def validate_template(self, **kwargs):
        self._record("validate_template", kwargs)
        body = kwargs.get("TemplateBody")
        if body is None and kwargs.get("TemplateURL") is None:
            raise _client_error("ValidationError", "Either Template URL or Template Body must be specified.", "ValidateTemplate")
        if body is not None and "Resources" not in body:
            raise _client_error("ValidationError", "Template format error: At least one Resources member must be defined.", "ValidateTemplate")
        return {"Parameters": [], "Description": ""}

    def describe_stacks(self, StackName=None):
        self._record("describe_stacks", {"StackName": StackName})
        if StackName not in self.stacks:
            raise _client_error("ValidationError", f"Stack with id {StackName} does not exist", "DescribeStacks")
        return {"Stacks": [deepcopy(self.stacks[StackName])]}

    def create_stack(self, **kwargs):
        self._record("create_stack", kwargs)
        name = kwargs["StackName"]
        if name in self.stacks:
            raise _client_error("AlreadyExistsException", f"Stack [{name}] already exists", "CreateStack")
        self.stacks[name] = {
            "StackName": name,
            "StackId": f"arn:aws:cloudformation:us-east-1:123456789012:stack/{name}/1",
            "StackStatus": "CREATE_COMPLETE",
        }
        self.requests[name] = deepcopy(kwargs)
        return {"StackId": self.stacks[name]["StackId"]}

    def update_stack(self, **kwargs):
        self._record("update_stack", kwargs)
        name = kwargs["StackName"]
        if name not in self.stacks:
            raise _client_error("ValidationError", f"Stack [{name}] does not exist", "UpdateStack")
        stack = self.stacks[name]
        previous = {k: v for k, v in self.requests.get(name, {}).items() if k in kwargs}
        if previous == kwargs:
            raise _client_error("ValidationError", "No updates are to be performed.", "UpdateStack")
        self.requests.setdefault(name, {}).update(deepcopy(kwargs))
        stack["StackStatus"] = "UPDATE_COMPLETE"
        return {"StackId": stack["StackId"]}

    def get_waiter(self, waiter_name):
        if waiter_name not in MockWaiter.STATUSES:
            raise ValueError(f"Unknown waiter: {waiter_name}")
        return MockWaiter(self, waiter_name)

    def seed_stack(self, name, status="CREATE_COMPLETE", outputs=None, request=None):
        """Add an existing stack for tests."""
        stack = {
            "StackName": name,
            "StackId": f"arn:aws:cloudformation:us-east-1:123456789012:stack/{name}/1",
            "StackStatus": status,
        }
        if outputs is not None:
            stack["Outputs"] = [{"OutputKey": k, "OutputValue": v} for k, v in outputs.items()]
        self.stacks[name] = stack
        self.requests[name] = deepcopy(request) if request else {"StackName": name}

    def seed_error(self, operation, code, message):
        """Make the next call to operation raise a ClientError."""
        self._state["errors"][operation] = _client_error(code, message)


class MockSession:
    """Mock boto3.Session that returns in-memory clients. State is shared per service type."""

    def __init__(self, profile_name=None, region_name=None, aws_access_key_id=None, aws_secret_access_key=None):
        self.profile_name = profile_name
        self.region_name = region_name
        self.aws_access_key_id = aws_access_key_id
        self.aws_secret_access_key = aws_secret_access_key
        self._cloudformation_state = {}
        self.client_kwargs = {}

    def client(self, service_name, region_name=None, **kwargs):
        if service_name == "cloudformation":
            self.client_kwargs = dict(kwargs, region_name=region_name or self.region_name)
            return MockCloudFormationClient(self._cloudformation_state)
        raise ValueError(f"Unknown service: {service_name}")
