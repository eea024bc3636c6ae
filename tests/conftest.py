"""Shared test fixtures and configuration."""

import tempfile
from datetime import date
from pathlib import Path

import pytest

from taskfoundry.config import GenerationMode
from taskfoundry.llm.credentials import CredentialResolver
from taskfoundry.llm.models import GenerationRequest
from taskfoundry.usage import MemoryUsageStore, UsageTracker


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def mock_repo_root(temp_dir):
    """Create a mock git repository root directory."""
    # Create .git directory to simulate a git repo
    git_dir = temp_dir / ".git"
    git_dir.mkdir()
    return temp_dir


@pytest.fixture
def isolated_config(mocker, temp_dir):
    """Point ~/.taskfoundry at a temporary directory."""
    home_dir = temp_dir / "home"
    home_dir.mkdir()
    config_dir = home_dir / ".taskfoundry"
    mocker.patch("taskfoundry.global_config._CONFIG_DIR", config_dir)
    return config_dir


@pytest.fixture
def sample_diff():
    """Sample staged diff."""
    return """diff --git a/auth/session.py b/auth/session.py
index 1234567..abcdefg 100644
--- a/auth/session.py
+++ b/auth/session.py
@@ -1,5 +1,9 @@
 def refresh(session):
-    return session
+    if session.expired:
+        session.token = issue_token(session.user)
+    return session
+
+def issue_token(user):
+    return sign(user.id)
"""


@pytest.fixture
def task_request(sample_diff):
    """A concise task generation request."""
    return GenerationRequest(diff_text=sample_diff)


@pytest.fixture
def commit_request(sample_diff):
    """A commit generation request without hints."""
    return GenerationRequest(diff_text=sample_diff, mode=GenerationMode.COMMIT)


@pytest.fixture
def sample_task_response():
    """Sample raw task response."""
    return """TITLE: Refresh expired session tokens
SUMMARY: Sessions with an expired token now get a new one on refresh.
TECHNICAL: Adds issue_token, which signs the user id."""


@pytest.fixture
def sample_commit_response():
    """Sample raw commit response."""
    return """TYPE: feat
SCOPE: auth
DESCRIPTION: refresh expired session tokens
BODY: Expired sessions are re-issued a signed token on refresh.
BREAKING:"""


@pytest.fixture
def fixed_today():
    return date(2024, 3, 15)


@pytest.fixture
def usage_store():
    """In-memory usage store."""
    return MemoryUsageStore()


@pytest.fixture
def usage_tracker(usage_store, fixed_today):
    """Usage tracker on a memory store with a fixed clock."""
    return UsageTracker(store=usage_store, clock=lambda: fixed_today)


@pytest.fixture
def empty_resolver():
    """Resolver that sees no API keys anywhere."""
    return CredentialResolver(environ={})

