"""Tests for Temporal task queue routing."""

import pytest

from src.app.temporal.routing import QueueKind, TemporalRoute, route_for_system_job, task_queue_name

pytestmark = pytest.mark.unit


def test_task_queue_name_format():
    assert task_queue_name("projects", QueueKind.JOBS, 0) == "projects.jobs.00"
    assert task_queue_name("acme", QueueKind.JOBS, 7) == "acme.jobs.07"


def test_system_jobs_use_shard_zero():
    route = route_for_system_job(namespace="default", prefix="projects")

    assert route == TemporalRoute(namespace="default", task_queue="projects.jobs.00")


def test_route_keeps_namespace():
    route = route_for_system_job(namespace="staging", prefix="projects")

    assert route.namespace == "staging"
