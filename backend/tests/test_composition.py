"""Tests for configuration and the composition root."""

import pytest

from chaycards import composition, config
from chaycards.adapters.in_memory_folder_store import InMemoryFolderStore
from chaycards.adapters.json_folder_store import JsonFolderStore
from chaycards.domain.services.review_service import ReviewService
from chaycards.domain.value_objects.folder_requests import CreateFolderRequest
from chaycards.domain.value_objects.operation_result import Success


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in (
        "CHAYCARDS_DATA_DIR",
        "CHAYCARDS_MAX_BACKUPS",
        "CHAYCARDS_OPERATION_TIMEOUT",
        "CHAYCARDS_LOG_LEVEL",
        "CHAYCARDS_REVIEW_DB_PATH",
        "CHAYCARDS_FOLDER_STORE",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("CHAYCARDS_DATA_DIR", str(tmp_path / "data"))


def test_defaults(tmp_path):
    assert config.get_data_dir() == tmp_path / "data"
    assert config.get_max_backups() == 5
    assert config.get_operation_timeout() == 30.0
    assert config.get_log_level() == "INFO"
    assert config.get_review_db_path() == tmp_path / "data" / "reviews.db"
    assert config.get_folder_store_kind() == "json"


def test_zero_timeout_disables(monkeypatch):
    monkeypatch.setenv("CHAYCARDS_OPERATION_TIMEOUT", "0")
    assert config.get_operation_timeout() is None


def test_folder_store_selection(monkeypatch):
    assert isinstance(composition.create_folder_store(), JsonFolderStore)

    monkeypatch.setenv("CHAYCARDS_FOLDER_STORE", "memory")
    assert isinstance(composition.create_folder_store(), InMemoryFolderStore)

    monkeypatch.setenv("CHAYCARDS_FOLDER_STORE", "s3")
    with pytest.raises(ValueError, match="Unknown folder store"):
        composition.create_folder_store()


async def test_manager_over_json_store_survives_restart():
    manager = await composition.create_folder_state_manager()
    result = await manager.create_folder(CreateFolderRequest("Inbox"))
    assert isinstance(result, Success)
    manager.close()

    reopened = await composition.create_folder_state_manager()

    assert [f.name for f in reopened.state.folders] == ["Inbox"]
    reopened.close()


def test_create_review_service(tmp_path):
    service = composition.create_review_service()

    assert isinstance(service, ReviewService)
    assert (tmp_path / "data" / "reviews.db").exists()


def test_load_environment_reads_dotenv(tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text("CHAYCARDS_MAX_BACKUPS=9\n")
    # Record the unset state so teardown removes what load_dotenv writes.
    monkeypatch.setenv("CHAYCARDS_MAX_BACKUPS", "")
    monkeypatch.delenv("CHAYCARDS_MAX_BACKUPS")

    composition.load_environment(env_file)

    assert config.get_max_backups() == 9
