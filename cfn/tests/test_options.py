"""Unit tests for option splitting and request payload derivation."""
import os
import sys
import pytest

_repo_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
if _repo_root not in sys.path:
    sys.path.insert(0, _repo_root)

from cfn.options import (
    AuthParams,
    OPTION_FIELDS,
    build_request,
    hash_to_records,
    resolve_template_body,
    split_options,
    update_request,
)

FIXTURES = os.path.join(os.path.dirname(os.path.abspath(__file__)), "fixtures")


class TestSplitOptions:
    """Tests for split_options."""

    def test_auth_and_stack_options_separated(self):
        raw = {
            "region": "us-east-1",
            "access_key_id": "abc",
            "secret_access_key": "def",
            "stack_name": "myStack",
            "template_body": "<body>",
        }
        auth, stack = split_options(raw)
        assert auth == AuthParams(region="us-east-1", access_key_id="abc", secret_access_key="def")
        assert stack.values == {"stack_name": "myStack", "template_body": "<body>"}

    def test_raw_mapping_not_mutated(self):
        raw = {"region": "us-east-1", "profile": "personal", "stack_name": "myStack"}
        before = dict(raw)
        split_options(raw)
        assert raw == before

    def test_profile_kept_in_auth(self):
        auth, stack = split_options({"profile": "personal", "stack_name": "s"})
        assert auth.profile == "personal"
        assert "profile" not in stack.values

    def test_none_values_dropped(self):
        _, stack = split_options({"stack_name": "s", "template_url": None, "dummy": None})
        assert stack.values == {"stack_name": "s"}

    def test_unknown_option_raises(self):
        with pytest.raises(ValueError, match="foo"):
            split_options({"stack_name": "s", "foo": "bar"})

    def test_file_template_body_read(self):
        _, stack = split_options({"template_body": "file://cfn.yaml"}, FIXTURES)
        with open(os.path.join(FIXTURES, "cfn.yaml")) as f:
            assert stack.template_body == f.read()

    def test_file_template_body_relative_to_cwd(self, monkeypatch):
        monkeypatch.chdir(os.path.dirname(FIXTURES))
        _, stack = split_options({"template_body": "file://fixtures/cfn.yaml"})
        assert "AssetsBucket" in stack.template_body

    def test_missing_template_file_raises(self):
        with pytest.raises(ValueError, match="missing.yaml"):
            split_options({"template_body": "file://missing.yaml"}, FIXTURES)


class TestResolveTemplateBody:
    """Tests for resolve_template_body."""

    def test_inline_body_unchanged(self):
        assert resolve_template_body("Resources: {}", FIXTURES) == "Resources: {}"

    def test_none_unchanged(self):
        assert resolve_template_body(None, FIXTURES) is None

    def test_absolute_file_reference(self):
        path = os.path.join(FIXTURES, "cfn.yaml")
        body = resolve_template_body(f"file://{path}", "/nonexistent")
        assert "AssetsBucket" in body


class TestHashToRecords:
    """Tests for hash_to_records."""

    def test_default_fields(self):
        assert hash_to_records({"a": "1", "b": "2"}) == [
            {"Key": "a", "Value": "1"},
            {"Key": "b", "Value": "2"},
        ]

    def test_custom_fields_and_none_skipped(self):
        records = hash_to_records({"key1": "val1", "key2": None}, "ParameterKey", "ParameterValue")
        assert records == [{"ParameterKey": "key1", "ParameterValue": "val1"}]

    def test_empty_mapping(self):
        assert hash_to_records({}) == []


class TestBuildRequest:
    """Tests for build_request."""

    def test_documented_scenario(self):
        _, stack = split_options({
            "stack_name": "myStack",
            "template_body": "<body>",
            "parameters": {"key1": "val1", "key2": "val2", "key3": None},
            "tags": {"key1": "val1"},
        })
        assert build_request(stack) == {
            "StackName": "myStack",
            "TemplateBody": "<body>",
            "Parameters": [
                {"ParameterKey": "key1", "ParameterValue": "val1"},
                {"ParameterKey": "key2", "ParameterValue": "val2"},
            ],
            "Tags": [{"Key": "key1", "Value": "val1"}],
        }

    def test_other_values_pass_through_unchanged(self):
        rollback = {"MonitoringTimeInMinutes": 10}
        _, stack = split_options({
            "capabilities": ["CAPABILITY_IAM"],
            "resource_types": ["AWS::*"],
            "role_arn": "ROLE",
            "notification_arns": ["arn"],
            "timeout_in_minutes": 10,
            "disable_rollback": True,
            "rollback_configuration": rollback,
        })
        request = build_request(stack)
        assert request == {
            "Capabilities": ["CAPABILITY_IAM"],
            "ResourceTypes": ["AWS::*"],
            "RoleARN": "ROLE",
            "NotificationARNs": ["arn"],
            "TimeoutInMinutes": 10,
            "DisableRollback": True,
            "RollbackConfiguration": rollback,
        }
        assert request["RollbackConfiguration"] is rollback

    def test_template_url_field_name(self):
        _, stack = split_options({"template_url": "https://bucket.s3.amazonaws.com/cfn.yaml"})
        assert build_request(stack) == {"TemplateURL": "https://bucket.s3.amazonaws.com/cfn.yaml"}

    def test_parameter_order_preserved(self):
        params = {f"p{i}": str(i) for i in range(10, 0, -1)}
        _, stack = split_options({"parameters": params})
        keys = [p["ParameterKey"] for p in build_request(stack)["Parameters"]]
        assert keys == list(params)

    def test_every_table_entry_is_distinct(self):
        assert len(set(OPTION_FIELDS.values())) == len(OPTION_FIELDS)


class TestUpdateRequest:
    """Tests for update_request."""

    def test_create_only_fields_dropped(self):
        request = {
            "StackName": "s",
            "TimeoutInMinutes": 10,
            "OnFailure": "DELETE",
            "EnableTerminationProtection": True,
            "DisableRollback": True,
        }
        assert update_request(request) == {"StackName": "s", "DisableRollback": True}
        assert "TimeoutInMinutes" in request
