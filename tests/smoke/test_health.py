"""
Smoke tests for a deployed blog.

Smoke tests are lightweight, fast checks that verify the critical paths
of a deployed system are operational. They answer one question: "is the
blog up and minimally functional?" If any of these fail, deeper suites
should not be attempted.

Key Concepts Demonstrated:
- Health-endpoint verification
- Plain HTTP checks without a browser
"""

import pytest
import requests

from blog_e2e.api_client import ApiClient
from blog_e2e.assertions import expect_response_status_to_be_less_than, expect_response_to_be_ok
from blog_e2e.constants import Paths


pytestmark = [pytest.mark.smoke, pytest.mark.universe("api")]


def test_backend_health(api_client):
    """Test that the backend health endpoint reports OK with a timestamp."""
    assert api_client.check_health()


def test_health_payload_shape(api, suite_config):
    """Test that the health payload carries the required fields."""
    # Act
    response = api.get(suite_config.health_url, timeout=10)

    # Assert
    expect_response_to_be_ok(response)
    ApiClient.validate_health_structure(response.json())


@pytest.mark.parametrize("path", [Paths.HOME, Paths.BLOG, Paths.ABOUT])
def test_public_route_responds(suite_scope, suite_config, path):
    """Test that each public route answers without a server error."""
    # Act
    response = requests.get(suite_config.url(path), timeout=10)

    # Assert
    expect_response_status_to_be_less_than(response, 500)
