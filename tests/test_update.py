from datetime import datetime, timedelta, timezone

import pytest
import responses

from verscli.config import CLIConfig, UpdateCheckConfig, load_cli_config, save_cli_config
from verscli.update import (
    ReleaseAsset,
    check_for_updates,
    get_latest_release,
    should_check_for_update,
    update_check_time,
)

REPOSITORY = "https://github.com/acme/tool"
LATEST_URL = "https://api.github.com/repos/acme/tool/releases/latest"
ALL_URL = "https://api.github.com/repos/acme/tool/releases"

RELEASE = {
    "tag_name": "v1.2.0",
    "name": "1.2.0",
    "body": "notes",
    "draft": False,
    "prerelease": False,
    "assets": [
        {
            "name": "vers-linux-amd64",
            "browser_download_url": "https://example.com/vers-linux-amd64",
            "size": 1024,
        }
    ],
    "published_at": "2024-01-01T00:00:00Z",
}


@pytest.fixture
def mocked():
    with responses.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def home(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    return tmp_path


def test_latest_release_is_decoded(mocked):
    mocked.add(responses.GET, LATEST_URL, json=RELEASE)
    release = get_latest_release(REPOSITORY, False, False)
    assert release.tag_name == "v1.2.0"
    assert release.name == "1.2.0"
    assert release.body == "notes"
    assert release.assets == [
        ReleaseAsset(
            name="vers-linux-amd64",
            browser_download_url="https://example.com/vers-linux-amd64",
            size=1024,
        )
    ]
    assert release.published_at == "2024-01-01T00:00:00Z"


def test_prerelease_skips_drafts(mocked):
    draft = dict(RELEASE, tag_name="v2.0.0", draft=True)
    pre = dict(RELEASE, tag_name="v1.3.0-rc1", prerelease=True)
    mocked.add(responses.GET, ALL_URL, json=[draft, pre, RELEASE])
    release = get_latest_release(REPOSITORY, True, False)
    assert release.tag_name == "v1.3.0-rc1"
    assert release.prerelease is True


def test_only_drafts_raises(mocked):
    mocked.add(responses.GET, ALL_URL, json=[dict(RELEASE, draft=True)])
    with pytest.raises(RuntimeError, match="no releases found"):
        get_latest_release(REPOSITORY, True, False)


def test_bad_status_raises(mocked):
    mocked.add(responses.GET, LATEST_URL, status=404, json={"message": "Not Found"})
    with pytest.raises(RuntimeError, match="GitHub API returned status: 404"):
        get_latest_release(REPOSITORY, False, False)


def test_invalid_body_raises(mocked):
    mocked.add(responses.GET, LATEST_URL, body="not json")
    with pytest.raises(RuntimeError, match="failed to decode release info"):
        get_latest_release(REPOSITORY, False, False)


def test_dev_version_skips_check(mocked, capsys):
    assert check_for_updates("dev", REPOSITORY, True) == (False, "")
    assert "[DEBUG] Skipping update check for development version" in capsys.readouterr().out
    assert len(mocked.calls) == 0


def test_same_version_has_no_update(mocked):
    mocked.add(responses.GET, LATEST_URL, json=RELEASE)
    assert check_for_updates("1.2.0", REPOSITORY, False) == (False, "v1.2.0")


def test_different_version_has_update(mocked):
    mocked.add(responses.GET, LATEST_URL, json=RELEASE)
    assert check_for_updates("v1.1.0", REPOSITORY, False) == (True, "v1.2.0")


def test_lookup_failure_reports_no_update(mocked):
    mocked.add(responses.GET, LATEST_URL, status=500)
    assert check_for_updates("v1.1.0", REPOSITORY, False) == (False, "")


def test_should_check_follows_schedule(home):
    now = datetime.now(timezone.utc)
    save_cli_config(CLIConfig(UpdateCheckConfig(last_check=now, next_check=now + timedelta(hours=1))))
    assert should_check_for_update() is False
    save_cli_config(CLIConfig(UpdateCheckConfig(last_check=now, next_check=now - timedelta(hours=1))))
    assert should_check_for_update() is True


def test_update_check_time_schedules_next_check(home):
    before = datetime.now(timezone.utc)
    update_check_time()
    config = load_cli_config()
    assert config.update_check.next_check > before
    assert config.update_check.last_check >= before
    assert should_check_for_update() is False