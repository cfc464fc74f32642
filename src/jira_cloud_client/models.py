"""Pydantic models for the Jira Builds and Deployments APIs.

Request models are what CI integrations submit; response models are what the
APIs return. Field names are snake_case in Python and camelCase on the wire.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class JiraModel(BaseModel):
    """Base for all wire models: camelCase aliases, unknown fields ignored."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra='ignore')


# Request Models
class JiraRequest(JiraModel):
    """Base class for payloads submitted to a Jira API."""
    properties: Optional[Dict[str, str]] = None
    provider_metadata: Optional[Dict[str, Any]] = None


class BuildsRequest(JiraRequest):
    """Bulk builds submission. Build entries are passed through as-is."""
    builds: List[Dict[str, Any]] = Field(default_factory=list)


class DeploymentsRequest(JiraRequest):
    """Bulk deployments submission. Deployment entries are passed through as-is."""
    deployments: List[Dict[str, Any]] = Field(default_factory=list)


# Response Models
class ApiErrorMessage(JiraModel):
    """Error reported for a rejected entity."""
    message: str
    error_trace_id: Optional[str] = None


class BuildKey(JiraModel):
    """Identifies a build within a pipeline."""
    pipeline_id: str
    build_number: int


class DeploymentKey(JiraModel):
    """Identifies a deployment within a pipeline and environment."""
    pipeline_id: str
    environment_id: str
    deployment_sequence_number: int


class RejectedBuild(JiraModel):
    key: BuildKey
    errors: List[ApiErrorMessage] = Field(default_factory=list)


class RejectedDeployment(JiraModel):
    key: DeploymentKey
    errors: List[ApiErrorMessage] = Field(default_factory=list)


class UnknownAssociation(JiraModel):
    association_type: str
    values: List[str] = Field(default_factory=list)


class BuildApiResponse(JiraModel):
    """Response of the builds bulk endpoint."""
    accepted_builds: List[BuildKey] = Field(default_factory=list)
    rejected_builds: List[RejectedBuild] = Field(default_factory=list)
    unknown_issue_keys: List[str] = Field(default_factory=list)
    unknown_associations: List[UnknownAssociation] = Field(default_factory=list)


class DeploymentApiResponse(JiraModel):
    """Response of the deployments bulk endpoint."""
    accepted_deployments: List[DeploymentKey] = Field(default_factory=list)
    rejected_deployments: List[RejectedDeployment] = Field(default_factory=list)
    unknown_issue_keys: List[str] = Field(default_factory=list)
    unknown_associations: List[UnknownAssociation] = Field(default_factory=list)
