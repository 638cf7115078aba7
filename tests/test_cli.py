from __future__ import annotations

import logging

import pytest
from click.testing import CliRunner

from s3purge import cli

ENV_VARS = (
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
    "S3PURGE_ACCESS_KEY",
    "S3PURGE_SECRET_KEY",
    "S3PURGE_PROVIDER",
    "S3PURGE_REGION",
    "S3PURGE_ENDPOINT_URL",
    "S3PURGE_THREADS",
)


@pytest.fixture
def runner(monkeypatch, tmp_path) -> CliRunner:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(cli, "configure_logging", lambda level: None)
    return CliRunner()


@pytest.fixture
def use_store(monkeypatch):
    """Route the CLI to an in-memory store, remembering the settings it was built from."""

    def _use(store):
        def build(settings, bucket):
            store.settings = settings
            store.bucket = bucket
            return store

        monkeypatch.setattr(cli, "BucketStore", build)
        return store

    return _use


def test_dry_run_exits_zero_without_deleting(runner, use_store, scenario_store, caplog) -> None:
    use_store(scenario_store)
    caplog.set_level(logging.INFO)

    result = runner.invoke(
        cli.main,
        ["--bucket", "media", "--dry-run", "--filters=-800x600,-1024x800.*(jpg|png)"],
    )

    assert result.exit_code == cli.EXIT_OK
    assert scenario_store.delete_calls == 0
    assert sum(r.getMessage().startswith("would delete ") for r in caplog.records) == 2


def test_multi_read_with_prefixes_deletes_matches(runner, use_store, make_store) -> None:
    store = use_store(make_store(["a/x.log", "b/y.log", "c/z.log"]))

    result = runner.invoke(
        cli.main,
        ["-b", "logs", "--multi-read", "--prefixes", "a,b", "--filters", r"\.log$", "--threads", "2"],
    )

    assert result.exit_code == cli.EXIT_OK
    assert sorted(store.deleted) == ["a/x.log", "b/y.log"]


def test_missing_filters_warns_and_deletes_nothing(runner, use_store, scenario_store, caplog) -> None:
    use_store(scenario_store)
    caplog.set_level(logging.WARNING)

    result = runner.invoke(cli.main, ["--bucket", "media"])

    assert result.exit_code == cli.EXIT_OK
    assert scenario_store.delete_calls == 0
    assert any("no filter patterns" in r.getMessage() for r in caplog.records)


def test_delete_failure_exits_with_partial_failure(runner, use_store, make_store) -> None:
    store = use_store(make_store(["keep-going", "refuse"], fail_keys={"refuse"}))

    result = runner.invoke(cli.main, ["--bucket", "b", "--filters", ".*"])

    assert result.exit_code == cli.EXIT_PARTIAL_FAILURE
    assert dict(store.deleted) == {"keep-going": 1}


def test_bucket_is_required(runner) -> None:
    result = runner.invoke(cli.main, ["--filters", ".*"])

    assert result.exit_code == 2


def test_threads_must_be_positive(runner) -> None:
    result = runner.invoke(cli.main, ["--bucket", "b", "--threads", "0"])

    assert result.exit_code == 2


def test_half_credentials_are_a_configuration_error(runner) -> None:
    result = runner.invoke(cli.main, ["--bucket", "b", "--access-key", "only-key", "--filters", ".*"])

    assert result.exit_code == cli.EXIT_CONFIG_ERROR


def test_no_multi_read_lists_on_one_shard(runner, use_store, scenario_store) -> None:
    use_store(scenario_store)

    result = runner.invoke(cli.main, ["-b", "media", "--no-multi-read", "-f", "img", "--dry-run"])

    assert result.exit_code == cli.EXIT_OK
    assert scenario_store.list_calls == [""]


def test_multi_read_short_flag_uses_default_shards(runner, use_store, scenario_store) -> None:
    use_store(scenario_store)

    result = runner.invoke(cli.main, ["-b", "media", "-m", "-f", "img", "--dry-run"])

    assert result.exit_code == cli.EXIT_OK
    assert len(scenario_store.list_calls) == 94


def test_provider_and_threads_come_from_environment(runner, use_store, scenario_store, monkeypatch) -> None:
    monkeypatch.setenv("S3PURGE_PROVIDER", "wasabi")
    monkeypatch.setenv("S3PURGE_THREADS", "3")
    store = use_store(scenario_store)
    seen_threads: list[int] = []
    real_pipeline = cli.PurgePipeline

    def pipeline(*args, **kwargs):
        seen_threads.append(kwargs["threads"])
        return real_pipeline(*args, **kwargs)

    monkeypatch.setattr(cli, "PurgePipeline", pipeline)

    result = runner.invoke(cli.main, ["-b", "media", "-f", "img", "--dry-run"])

    assert result.exit_code == cli.EXIT_OK
    assert store.settings.provider == "wasabi"
    assert store.settings.resolved_endpoint() == "https://s3.us-east-1.wasabisys.com"
    assert store.settings.threads == 3
    assert seen_threads == [3]


def test_flags_override_environment(runner, use_store, scenario_store, monkeypatch) -> None:
    monkeypatch.setenv("S3PURGE_PROVIDER", "wasabi")
    store = use_store(scenario_store)

    result = runner.invoke(cli.main, ["-b", "media", "--provider", "minio", "-f", "img", "--dry-run"])

    assert result.exit_code == cli.EXIT_OK
    assert store.settings.provider == "minio"


def test_invalid_threads_in_environment_is_a_configuration_error(runner, monkeypatch) -> None:
    monkeypatch.setenv("S3PURGE_THREADS", "0")

    result = runner.invoke(cli.main, ["-b", "media", "-f", "img"])

    assert result.exit_code == cli.EXIT_CONFIG_ERROR
