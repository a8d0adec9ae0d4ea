"""Tests for the Picogen job polling client."""

import asyncio
import json
from datetime import datetime

import httpx
import pytest

from genai_clients.clients.picogen_client import (
    JobPollingClient,
    JobState,
    MidjourneyJobRequest,
    StabilityJobRequest,
    next_state,
)
from genai_clients.errors import JobFailedError, PollError, RequestError, SubmissionError


class FakeSleep:
    """Records requested delays without waiting."""

    def __init__(self):
        self.calls = []

    async def __call__(self, seconds):
        self.calls.append(seconds)


def status_sequence_handler(statuses, result=None):
    """Serve /job/get with the given statuses, one per poll."""
    remaining = list(statuses)

    def handler(request: httpx.Request):
        if request.url.path.startswith("/job/get/"):
            status = remaining.pop(0)
            item = {"id": "job-1", "status": status, "duration_ms": 12000, "result": result or []}
            return httpx.Response(200, json=[None, item])
        if request.url.host == "cdn.example.com":
            return httpx.Response(200, content=request.url.path.encode())
        if request.url.path == "/job/run":
            return httpx.Response(200, json=[None, {"id": "job-1", "cost": 2}])
        return httpx.Response(404)

    return handler


def test_next_state_transitions():
    assert next_state(JobState.SUBMITTED, "queued") is JobState.RUNNING
    assert next_state(JobState.SUBMITTED, "running") is JobState.RUNNING
    assert next_state(JobState.RUNNING, "running") is JobState.RUNNING
    assert next_state(JobState.RUNNING, "completed") is JobState.COMPLETED
    assert next_state(JobState.SUBMITTED, "error") is JobState.ERROR


def test_next_state_rejects_terminal_states():
    with pytest.raises(ValueError):
        next_state(JobState.COMPLETED, "running")
    with pytest.raises(ValueError):
        next_state(JobState.ERROR, "completed")


@pytest.mark.asyncio
async def test_submit_job_reads_second_element(settings, make_transport):
    def handler(request):
        return httpx.Response(200, json=[{"id": "other", "cost": 99}, {"id": "job-42", "cost": 3}])

    transport = make_transport(handler)
    client = JobPollingClient(settings, transport=transport)

    job = await client.do_midjourney_job(MidjourneyJobRequest(prompt="a robot leaping"))

    assert job.id == "job-42"
    assert job.cost == 3
    request = transport.requests[0]
    assert request.method == "POST"
    assert request.url.path == "/job/run"
    assert request.headers["API-Token"] == "pico-token"
    body = json.loads(request.content)
    assert body["prompt"] == "a robot leaping"
    assert body["version"] == "mj-5.2"


@pytest.mark.asyncio
async def test_submit_stability_job_body(settings, make_transport):
    transport = make_transport(lambda r: httpx.Response(200, json=[None, {"id": "s-1", "cost": 1}]))
    client = JobPollingClient(settings, transport=transport)

    job = await client.do_stability_job(StabilityJobRequest(prompt="a castle"))

    assert job.id == "s-1"
    assert json.loads(transport.requests[0].content)["engine"] == "xl-v1.0"


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [[], [{"id": "only", "cost": 1}], [{"id": "a", "cost": 1}, None], {"id": "x"}])
async def test_submit_job_malformed_response(settings, make_transport, payload):
    client = JobPollingClient(settings, transport=make_transport(lambda r: httpx.Response(200, json=payload)))

    with pytest.raises(SubmissionError):
        await client.submit_job(MidjourneyJobRequest(prompt="p"))


@pytest.mark.asyncio
async def test_submit_job_http_error(settings, make_transport):
    client = JobPollingClient(settings, transport=make_transport(lambda r: httpx.Response(500, text="boom")))

    with pytest.raises(SubmissionError):
        await client.submit_job(MidjourneyJobRequest(prompt="p"))


@pytest.mark.asyncio
async def test_poll_status_returns_first_non_null(settings, make_transport):
    items = [None, {"id": "job-1", "status": "running", "result": []}, {"id": "job-1", "status": "completed"}]
    transport = make_transport(lambda r: httpx.Response(200, json=items))
    client = JobPollingClient(settings, transport=transport)

    item = await client.poll_status("job-1")

    assert item.status == "running"
    assert transport.paths() == ["/job/get/job-1"]


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [[], [None, None]])
async def test_poll_status_without_snapshot(settings, make_transport, payload):
    client = JobPollingClient(settings, transport=make_transport(lambda r: httpx.Response(200, json=payload)))

    with pytest.raises(PollError):
        await client.poll_status("job-1")


@pytest.mark.asyncio
async def test_wait_sleeps_between_running_polls(settings, make_transport):
    sleep = FakeSleep()
    transport = make_transport(status_sequence_handler(["running", "running", "completed"]))
    client = JobPollingClient(settings, transport=transport, sleep=sleep)

    item = await client.wait_for_completion("job-1")

    assert item.status == "completed"
    assert sleep.calls == [5.0, 5.0]
    assert len(transport.requests) == 3


@pytest.mark.asyncio
async def test_wait_fails_immediately_on_error(settings, make_transport):
    sleep = FakeSleep()
    transport = make_transport(status_sequence_handler(["error", "completed"]))
    client = JobPollingClient(settings, transport=transport, sleep=sleep)

    with pytest.raises(JobFailedError) as exc_info:
        await client.wait_for_completion("job-1")

    assert exc_info.value.snapshot.status == "error"
    assert sleep.calls == []
    assert len(transport.requests) == 1


@pytest.mark.asyncio
async def test_wait_stops_polling_after_error(settings, make_transport):
    sleep = FakeSleep()
    transport = make_transport(status_sequence_handler(["queued", "error", "completed"]))
    client = JobPollingClient(settings, transport=transport, sleep=sleep)

    with pytest.raises(JobFailedError):
        await client.wait_for_completion("job-1")

    assert sleep.calls == [5.0]
    assert len(transport.requests) == 2


@pytest.mark.asyncio
async def test_wait_is_cancellable_while_sleeping(settings, make_transport):
    sleeping = asyncio.Event()

    async def slow_sleep(seconds):
        sleeping.set()
        await asyncio.sleep(3600)

    transport = make_transport(status_sequence_handler(["running", "completed"]))
    client = JobPollingClient(settings, transport=transport, sleep=slow_sleep)

    task = asyncio.create_task(client.wait_for_completion("job-1"))
    await sleeping.wait()
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    assert len(transport.requests) == 1


@pytest.mark.asyncio
async def test_download_results_shares_one_timestamp(settings, make_transport, tmp_path):
    urls = ["https://cdn.example.com/a.png", "https://cdn.example.com/b.png", "https://cdn.example.com/c.png"]
    client = JobPollingClient(settings, transport=make_transport(status_sequence_handler([])))

    paths = await client.download_results(urls, now=datetime(2024, 1, 2, 3, 4, 5))

    assert [p.name for p in paths] == [
        "image_20240102030405_0.png",
        "image_20240102030405_1.png",
        "image_20240102030405_2.png",
    ]
    assert [p.read_bytes() for p in paths] == [b"/a.png", b"/b.png", b"/c.png"]
    assert sorted(p.name for p in (tmp_path / "images").iterdir()) == [p.name for p in paths]


@pytest.mark.asyncio
async def test_download_failure_aborts_remaining(settings, make_transport, tmp_path):
    def handler(request):
        if request.url.path == "/broken.png":
            return httpx.Response(404)
        return httpx.Response(200, content=b"png")

    transport = make_transport(handler)
    client = JobPollingClient(settings, transport=transport)
    urls = ["https://cdn.example.com/ok.png", "https://cdn.example.com/broken.png", "https://cdn.example.com/never.png"]

    with pytest.raises(RequestError):
        await client.download_results(urls)

    assert transport.paths() == ["/ok.png", "/broken.png"]
    assert len(list((tmp_path / "images").iterdir())) == 1


@pytest.mark.asyncio
async def test_run_job_completed_on_first_check(settings, make_transport, tmp_path):
    sleep = FakeSleep()
    handler = status_sequence_handler(["completed"], result=["https://cdn.example.com/result.png"])
    transport = make_transport(handler)
    client = JobPollingClient(settings, transport=transport, sleep=sleep)

    paths = await client.run_job(MidjourneyJobRequest(prompt="a robot"))

    assert len(paths) == 1
    assert paths[0].read_bytes() == b"/result.png"
    assert sleep.calls == []
    assert transport.paths() == ["/job/run", "/job/get/job-1", "/result.png"]


@pytest.mark.asyncio
async def test_get_job_list_returns_completed_results(settings, make_transport):
    listing = [
        None,
        {"items": [
            {"id": "1", "status": "completed", "result": ["https://cdn.example.com/1.png", "x"]},
            {"id": "2", "status": "running", "result": []},
        ]},
        {"items": [{"id": "3", "status": "completed", "result": ["https://cdn.example.com/3.png"]}]},
    ]
    transport = make_transport(lambda r: httpx.Response(200, json=listing))
    client = JobPollingClient(settings, transport=transport)

    urls = await client.get_job_list()

    assert urls == ["https://cdn.example.com/1.png", "https://cdn.example.com/3.png"]
    assert transport.paths() == ["/job/list/"]


@pytest.mark.asyncio
async def test_download_skips_indices_already_on_disk(settings, make_transport, tmp_path):
    images = tmp_path / "images"
    images.mkdir()
    (images / "image_20240102030405_0.png").write_bytes(b"earlier run")
    client = JobPollingClient(settings, transport=make_transport(status_sequence_handler([])))
    urls = ["https://cdn.example.com/a.png", "https://cdn.example.com/b.png"]

    paths = await client.download_results(urls, now=datetime(2024, 1, 2, 3, 4, 5))

    assert [p.name for p in paths] == ["image_20240102030405_1.png", "image_20240102030405_2.png"]
    assert [p.read_bytes() for p in paths] == [b"/a.png", b"/b.png"]
    assert (images / "image_20240102030405_0.png").read_bytes() == b"earlier run"


@pytest.mark.asyncio
async def test_download_disk_failure_is_request_error(settings, make_transport, tmp_path):
    blocker = tmp_path / "not-a-directory"
    blocker.write_text("file")
    blocked = settings.model_copy(update={"output_dir": str(blocker)})
    client = JobPollingClient(blocked, transport=make_transport(status_sequence_handler([])))

    with pytest.raises(RequestError) as exc_info:
        await client.download_results(["https://cdn.example.com/a.png"])

    assert isinstance(exc_info.value.__cause__, OSError)
