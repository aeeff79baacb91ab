#!/usr/bin/env python3
"""
CloudFormation stack deployment package.
"""
from .client import CfnClient
from .config import load_config
from .options import AuthParams, StackOptions, build_request, split_options

__all__ = ['CfnClient', 'load_config', 'AuthParams', 'StackOptions', 'build_request', 'split_options']
