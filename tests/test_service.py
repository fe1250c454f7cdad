"""Test the end-to-end pipeline."""

import json

import pytest

from integration import CollectionError, DataIntegrationService
from integration.common import RootConfig
from integration.fetch import FetchRequest, TransportError
from integration.records import Post
from main import main


@pytest.fixture(autouse=True)
def no_env_override(monkeypatch):
    monkeypatch.delenv("DATA_API_BASE_URL", raising=False)


@pytest.fixture
def raw_config() -> dict:
    return {
        "fetch": {"base_url": "https://api.test", "max_retries": 2, "backoff_base": 0},
        "requests": {
            "users": {"params": {"_limit": 5}},
            "posts": {"params": {"_limit": 10}},
        },
        "analysis": {"top_n": 3, "long_post_threshold": 100},
    }


@pytest.fixture
def requests_batch(raw_config):
    return FetchRequest.batch_from_config(raw_config["requests"])


@pytest.mark.asyncio
async def test_run(raw_config, requests_batch, make_transport, ok, logger, users_payload, posts_payload):
    """Test a full run over healthy endpoints."""
    transport = make_transport({"users": [ok(users_payload)], "posts": [ok(posts_payload)]})
    service = DataIntegrationService.from_config(
        RootConfig.model_validate(raw_config), transport=transport, logger=logger
    )

    async with service:
        report = await service.run(requests_batch)

    assert report.results == {
        "user_post_counts": {1: 2, 2: 1},
        "long_posts_count": 2,
        "top_3_users_by_posts": [
            {"user_id": 1, "username": "Bret", "post_count": 2},
            {"user_id": 2, "username": "Antonette", "post_count": 1},
        ],
    }
    assert report.elapsed >= 0
    assert "https://api.test/users?_limit=5" in transport.calls
    assert any(m.startswith("Total execution time") for m in logger.messages("info"))


@pytest.mark.asyncio
async def test_run_partial_failure(raw_config, requests_batch, make_transport, ok, logger, posts_payload):
    """Test a failed endpoint only removes the metrics that depend on it."""
    transport = make_transport(
        {"users": [TransportError("Connection refused")], "posts": [ok(posts_payload)]}
    )
    service = DataIntegrationService.from_config(
        RootConfig.model_validate(raw_config), transport=transport, logger=logger
    )

    report = await service.run(requests_batch)

    assert list(report.dataset) == ["posts"]
    assert all(isinstance(post, Post) for post in report.dataset["posts"])
    assert report.dataset.status("users") == "failed"
    assert report.results == {"long_posts_count": 2}
    assert transport.calls_for("users") == 2
    assert transport.calls_for("posts") == 1


@pytest.mark.asyncio
async def test_run_total_failure(raw_config, requests_batch, make_transport, logger):
    """Test the pipeline aborts when no endpoint could be fetched."""
    transport = make_transport(
        {"users": [TransportError("Connection refused")], "posts": [TransportError("Connection refused")]}
    )
    service = DataIntegrationService.from_config(
        RootConfig.model_validate(raw_config), transport=transport, logger=logger
    )

    with pytest.raises(CollectionError, match="all 2 endpoint"):
        await service.collect_and_process(requests_batch)

    assert "Data collection failed for every endpoint" in logger.messages("critical")


@pytest.mark.asyncio
async def test_run_empty_batch(raw_config, make_transport, logger):
    """Test an empty batch is not a collection failure."""
    service = DataIntegrationService.from_config(
        RootConfig.model_validate(raw_config), transport=make_transport({}), logger=logger
    )

    report = await service.run([])

    assert report.results == {}
    assert len(report.dataset) == 0


@pytest.mark.asyncio
async def test_close_closes_transport(raw_config, mocker):
    """Test leaving the service context closes the transport."""
    transport = mocker.AsyncMock()
    service = DataIntegrationService.from_config(RootConfig.model_validate(raw_config), transport=transport)

    async with service:
        pass

    transport.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_main_writes_results(raw_config, make_transport, ok, tmp_path, users_payload, posts_payload):
    """Test the entry point writes the analysis as JSON."""
    transport = make_transport({"users": [ok(users_payload)], "posts": [ok(posts_payload)]})
    out = tmp_path / "out" / "results.json"

    code = await main(raw_config, out=out, transport=transport)

    assert code == 0
    results = json.loads(out.read_text(encoding="utf-8"))
    assert results["user_post_counts"] == {"1": 2, "2": 1}
    assert results["long_posts_count"] == 2
    assert [entry["user_id"] for entry in results["top_3_users_by_posts"]] == [1, 2]


@pytest.mark.asyncio
async def test_main_prints_results(raw_config, make_transport, ok, capsys, posts_payload):
    """Test results go to stdout without an output path."""
    transport = make_transport({"users": [ok([])], "posts": [ok(posts_payload)]})

    code = await main(raw_config, transport=transport)

    assert code == 0
    printed = capsys.readouterr().out
    assert "### Analysis results ###" in printed
    assert '"long_posts_count": 2' in printed


@pytest.mark.asyncio
async def test_main_total_failure(raw_config, make_transport, tmp_path):
    """Test the entry point reports failure when every endpoint fails."""
    transport = make_transport(
        {"users": [TransportError("down")], "posts": [TransportError("down")]}
    )
    out = tmp_path / "results.json"

    code = await main(raw_config, out=out, transport=transport)

    assert code == 1
    assert not out.exists()


@pytest.mark.asyncio
async def test_main_rejects_invalid_config(raw_config):
    """Test unknown config sections are rejected before any request."""
    with pytest.raises(ValueError):
        await main({**raw_config, "storage": {}})
