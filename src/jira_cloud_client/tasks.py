"""Command line tasks for submitting build and deployment updates to Jira.

Examples:
    jira-cloud submit-builds --payload=builds.json --cloud-id=abc123 --site=https://acme.atlassian.net
    JIRA_ACCESS_TOKEN=... jira-cloud submit-deployments --payload=deploy.json --cloud-id=abc123 --site=...
"""

import json
import os
import sys
from pathlib import Path

from invoke import Collection, Program, task
from invoke.exceptions import Exit

from . import __version__
from .api import ApiUpdateFailedError, builds_api, deployments_api
from .config.logging import bootstrap_logging
from .config.settings import SettingsError, load_settings
from .models import BuildApiResponse, BuildsRequest, DeploymentApiResponse, DeploymentsRequest

TOKEN_ENV_VAR = 'JIRA_ACCESS_TOKEN'

SUBMIT_HELP = {
    'payload': 'Path to the JSON payload file',
    'cloud_id': 'Jira Cloud Id of the target site',
    'site': 'Jira site URL (used in messages only)',
    'token': f'Access token (defaults to ${TOKEN_ENV_VAR})',
    'settings': 'Optional YAML settings file (defaults to config/jira.yaml)',
    'debug': 'Enable debug logging (sets LOG_LEVEL=DEBUG)',
}


def _load_payload(path, request_type):
    payload_path = Path(path)
    if not payload_path.exists():
        raise Exit(f"❌ Payload file not found: {payload_path}", code=2)
    try:
        with open(payload_path, 'r', encoding='utf-8') as f:
            return request_type.model_validate(json.load(f))
    except ValueError as e:
        raise Exit(f"❌ Invalid payload in {payload_path}: {e}", code=2)


def _resolve_token(token):
    token = token or os.environ.get(TOKEN_ENV_VAR)
    if not token:
        raise Exit(f"❌ Access token required: pass --token or set {TOKEN_ENV_VAR}", code=2)
    return token


def _submit(api_factory, request_type, response_type, payload, cloud_id, site, token, settings, debug):
    if debug:
        os.environ['LOG_LEVEL'] = 'DEBUG'
    bootstrap_logging(__name__)

    if not cloud_id or not site:
        raise Exit("❌ Both --cloud-id and --site are required", code=2)

    try:
        client_settings = load_settings(settings)
    except SettingsError as e:
        raise Exit(f"❌ {e}", code=2)

    request = _load_payload(payload, request_type)
    api = api_factory(client_settings)
    try:
        return api.post_update(cloud_id, _resolve_token(token), site, request, response_type)
    except ApiUpdateFailedError as e:
        raise Exit(f"❌ Update failed: {e}", code=1)
    finally:
        api.close()


@task(help=SUBMIT_HELP)
def submit_builds(ctx, payload, cloud_id=None, site=None, token=None, settings=None, debug=False):
    """
    Submit a builds payload to the Jira Builds API.
    """
    response = _submit(builds_api, BuildsRequest, BuildApiResponse,
                       payload, cloud_id, site, token, settings, debug)
    print(f"✅ Accepted builds: {len(response.accepted_builds)}")
    for rejected in response.rejected_builds:
        messages = '; '.join(error.message for error in rejected.errors)
        print(f"⚠️  Rejected build {rejected.key.pipeline_id}#{rejected.key.build_number}: {messages}",
              file=sys.stderr)
    if response.unknown_issue_keys:
        print(f"⚠️  Unknown issue keys: {', '.join(response.unknown_issue_keys)}", file=sys.stderr)
    return response


@task(help=SUBMIT_HELP)
def submit_deployments(ctx, payload, cloud_id=None, site=None, token=None, settings=None, debug=False):
    """
    Submit a deployments payload to the Jira Deployments API.
    """
    response = _submit(deployments_api, DeploymentsRequest, DeploymentApiResponse,
                       payload, cloud_id, site, token, settings, debug)
    print(f"✅ Accepted deployments: {len(response.accepted_deployments)}")
    for rejected in response.rejected_deployments:
        key = rejected.key
        messages = '; '.join(error.message for error in rejected.errors)
        print(f"⚠️  Rejected deployment {key.pipeline_id}/{key.environment_id}"
              f"#{key.deployment_sequence_number}: {messages}", file=sys.stderr)
    if response.unknown_issue_keys:
        print(f"⚠️  Unknown issue keys: {', '.join(response.unknown_issue_keys)}", file=sys.stderr)
    return response


namespace = Collection(submit_builds, submit_deployments)

program = Program(namespace=namespace, version=__version__, name='jira-cloud')
