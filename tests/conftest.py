"""
Root pytest configuration for jira-cloud-client.
"""

# Auto-bootstrap logging for all tests
from jira_cloud_client.config.logging import bootstrap_logging
bootstrap_logging()
