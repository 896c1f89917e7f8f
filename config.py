"""Configuration for Stack Deployer

This module contains all configurable variables for the CloudFormation deployment
tooling: AWS connection settings, change set naming and polling behaviour.
For local overrides, use .env.local file.
"""

import os
from pathlib import Path

from botocore.config import Config
from dotenv import load_dotenv

# Load environment variables from .env.local if it exists
env_path = Path(__file__).parent / ".env.local"
if env_path.exists():
    load_dotenv(dotenv_path=env_path)

# AWS Configuration
AWS_REGION = os.getenv("AWS_REGION", "us-east-1")
AWS_PROFILE = os.getenv("AWS_PROFILE")
AWS_ENDPOINT_URL = os.getenv("AWS_ENDPOINT_URL")

# Client configuration shared by every boto3 client we create
BOTO_CLIENT_CONFIG = Config(
    retries={"max_attempts": 3, "mode": "standard"},
    connect_timeout=10,
    read_timeout=60,
)

# Change set configuration
CHANGE_SET_NAME_PREFIX = "StackUpdate-"
CHANGE_SET_CAPABILITIES = [
    "CAPABILITY_IAM",
    "CAPABILITY_NAMED_IAM",
    "CAPABILITY_AUTO_EXPAND",
]

# Polling configuration (seconds)
CHANGE_SET_POLL_INTERVAL = 2
STACK_POLL_SHORT_INTERVAL = 2
STACK_POLL_LONG_INTERVAL = 5
STACK_POLL_RAPID_ATTEMPTS = 5  # Short interval for the first polls after a change

# Deadlines (seconds), 0 disables the deadline
CHANGE_SET_TIMEOUT = int(os.getenv("CHANGE_SET_TIMEOUT", "600"))
STACK_OPERATION_TIMEOUT = int(os.getenv("STACK_OPERATION_TIMEOUT", "7200"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")
