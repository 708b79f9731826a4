"""Tests for GitHub pull request and App authentication helpers."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from github import GithubException

from reviewbot_core.gh.app_auth import get_app_integration, get_installation_client
from reviewbot_core.gh.pull_request import get_changed_files, get_file_content, submit_review
from reviewbot_core.models import ChangedFile, Finding
from reviewbot_core.verdict import decide_verdict

SHA = "a" * 40


class TestGetChangedFiles:
    def test_maps_github_files(self):
        pr = MagicMock()
        pr.get_files.return_value = [
            SimpleNamespace(filename="a.py", patch="+x", changes=3),
            SimpleNamespace(filename="logo.png", patch=None, changes=0),
        ]
        assert get_changed_files(pr) == [
            ChangedFile(path="a.py", patch="+x", changes=3),
            ChangedFile(path="logo.png", patch=None, changes=0),
        ]

    def test_empty_pull_request(self):
        pr = MagicMock()
        pr.get_files.return_value = []
        assert get_changed_files(pr) == []


class TestGetFileContent:
    def test_decodes_content(self):
        repo = MagicMock()
        repo.get_contents.return_value = SimpleNamespace(decoded_content=b"print('hi')\n")
        assert get_file_content(repo, "a.py", SHA) == "print('hi')\n"
        repo.get_contents.assert_called_once_with("a.py", ref=SHA)

    def test_returns_none_on_github_error(self):
        repo = MagicMock()
        repo.get_contents.side_effect = GithubException(404, "Not Found")
        assert get_file_content(repo, "gone.py", SHA) is None

    def test_returns_none_for_directory(self):
        repo = MagicMock()
        repo.get_contents.return_value = [MagicMock(), MagicMock()]
        assert get_file_content(repo, "pkg", SHA) is None

    def test_returns_none_for_undecodable_content(self):
        repo = MagicMock()
        repo.get_contents.return_value = SimpleNamespace(decoded_content=b"\xff\xfe\x00binary")
        assert get_file_content(repo, "blob.bin", SHA) is None


class TestSubmitReview:
    def test_approve_has_no_comments(self):
        pr = MagicMock()
        submit_review(pr, decide_verdict([]))
        pr.create_review.assert_called_once_with(body="Code review completed. No issues found! 👍", event="APPROVE")

    def test_request_changes_posts_every_finding(self):
        pr = MagicMock()
        findings = [Finding("a.py", 1, "too big", "diff_size"), Finding("b.py", 1, "TODO", "todo")]
        submit_review(pr, decide_verdict(findings))
        kwargs = pr.create_review.call_args.kwargs
        assert kwargs["event"] == "REQUEST_CHANGES"
        assert kwargs["comments"] == [
            {"path": "a.py", "position": 1, "body": "too big"},
            {"path": "b.py", "position": 1, "body": "TODO"},
        ]

    def test_submission_errors_propagate(self):
        pr = MagicMock()
        pr.create_review.side_effect = GithubException(422, "Unprocessable")
        with pytest.raises(GithubException):
            submit_review(pr, decide_verdict([]))


class TestAppAuth:
    def test_integration_requires_credentials(self):
        with pytest.raises(ValueError):
            get_app_integration(None, "key")
        with pytest.raises(ValueError):
            get_app_integration("123", "")

    def test_integration_uses_app_auth(self, mocker):
        mock_integration = mocker.patch("reviewbot_core.gh.app_auth.GithubIntegration")
        mock_auth = mocker.patch("reviewbot_core.gh.app_auth.Auth")
        get_app_integration("123", "pem")
        mock_auth.AppAuth.assert_called_once_with(123, "pem")
        mock_integration.assert_called_once_with(auth=mock_auth.AppAuth.return_value)

    def test_installation_token_exchange(self, mocker):
        mock_github = mocker.patch("reviewbot_core.gh.app_auth.Github")
        mock_auth = mocker.patch("reviewbot_core.gh.app_auth.Auth")
        integration = MagicMock()
        integration.get_access_token.return_value = SimpleNamespace(token="ghs_installation")

        client = get_installation_client(integration, 99)

        integration.get_access_token.assert_called_once_with(99)
        mock_auth.Token.assert_called_once_with("ghs_installation")
        mock_github.assert_called_once_with(auth=mock_auth.Token.return_value)
        assert client is mock_github.return_value

    def test_token_exchange_failure_propagates(self):
        integration = MagicMock()
        integration.get_access_token.side_effect = GithubException(401, "Bad credentials")
        with pytest.raises(GithubException):
            get_installation_client(integration, 99)
