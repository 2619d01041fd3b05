"""Tests for CacheCleanupAgent (in-memory store, registry, names and metrics)."""

import pytest

from cachesweep.application.use_cases.cache_cleanup import CacheCleanupAgent
from cachesweep.core.constants import CLEANUP_AGENT_TYPE, CORE_PROVIDER_NAME
from cachesweep.domain.enums import TableKind
from cachesweep.domain.exceptions import CacheStoreException, RegistryException
from tests.fakes import (
    FakeRunLock,
    FakeTableNames,
    InMemoryCacheStore,
    RecordingMetrics,
    caching_agent,
    registry_of,
)


def _agent(
    store: InMemoryCacheStore,
    registry,
    metrics: RecordingMetrics | None = None,
    *,
    names: FakeTableNames | None = None,
    run_lock: FakeRunLock | None = None,
) -> CacheCleanupAgent:
    return CacheCleanupAgent(
        provider_registry=registry,
        cache_store=store,
        table_names=names or FakeTableNames(),
        metrics=metrics or RecordingMetrics(),
        run_lock=run_lock,
    )


class TestServerGroupsScenario:
    """agentA (authoritative) and agentB (informative) remain; agentC was removed."""

    async def test_deletes_rows_of_removed_agent(
        self, server_groups_agent, server_groups_store
    ) -> None:
        result = await server_groups_agent.run()

        assert server_groups_store.remaining("res_serverGroups") == {"1": "agentA", "3": "agentB"}
        assert result.total_deleted == 2
        assert result.failures == 0
        assert result.agent_type_count == 2
        assert result.data_type_count == 1
        assert result.finished_at is not None

    async def test_both_tables_scanned_relationships_first(
        self, server_groups_agent, server_groups_store
    ) -> None:
        await server_groups_agent.run()
        assert server_groups_store.scans == ["rel_serverGroups", "res_serverGroups"]

    async def test_counter_recorded_per_table(self, server_groups_agent, metrics) -> None:
        await server_groups_agent.run()
        assert metrics.deleted_for("serverGroups", TableKind.RESOURCE) == [2]
        assert metrics.deleted_for("serverGroups", TableKind.RELATIONSHIP) == [0]
        assert [dt for dt, _ in metrics.durations] == ["serverGroups"]

    async def test_result_names_culprit_owners(self, server_groups_agent) -> None:
        result = await server_groups_agent.run()
        resource = next(t for t in result.tables if t.kind == TableKind.RESOURCE)
        assert resource.table_name == "res_serverGroups"
        assert resource.deleted == 2
        assert resource.culprit_owners == {"agentC"}

    async def test_second_run_deletes_nothing(
        self, server_groups_agent, server_groups_store, metrics
    ) -> None:
        await server_groups_agent.run()
        deletes_after_first = len(server_groups_store.deletes)

        result = await server_groups_agent.run()

        assert result.total_deleted == 0
        assert len(server_groups_store.deletes) == deletes_after_first
        assert metrics.deleted_for("serverGroups", TableKind.RESOURCE) == [2, 0]


def test_agent_identity() -> None:
    agent = _agent(InMemoryCacheStore(), registry_of())
    assert agent.agent_type == CLEANUP_AGENT_TYPE
    assert agent.provider_name == CORE_PROVIDER_NAME
    assert agent.poll_interval_seconds == 120
    assert agent.timeout_seconds == 60


async def test_clean_table_issues_no_delete_and_records_zero() -> None:
    store = InMemoryCacheStore({"res_images": [("1", "agentA")], "rel_images": [("u1", "agentA")]})
    metrics = RecordingMetrics()
    await _agent(store, registry_of(caching_agent("agentA", "images")), metrics).run()

    assert store.deletes == []
    assert metrics.deleted_for("images", TableKind.RESOURCE) == [0]
    assert metrics.deleted_for("images", TableKind.RELATIONSHIP) == [0]


async def test_relationship_rows_use_uuid_column() -> None:
    store = InMemoryCacheStore({"rel_images": [("u1", "agentA"), ("u2", "gone")]})
    await _agent(store, registry_of(caching_agent("agentA", "images"))).run()
    assert store.deletes == [("rel_images", "uuid", ("u2",))]
    assert store.remaining("rel_images") == {"u1": "agentA"}


async def test_stale_rows_deleted_in_batches_of_100() -> None:
    store = InMemoryCacheStore(
        {"res_images": [(str(i), "gone") for i in range(250)] + [("keep", "agentA")]}
    )
    result = await _agent(store, registry_of(caching_agent("agentA", "images"))).run()

    assert [len(batch) for _, _, batch in store.deletes] == [100, 100, 50]
    assert result.total_deleted == 250
    assert store.remaining("res_images") == {"keep": "agentA"}


async def test_table_shared_by_two_data_types_processed_once() -> None:
    """'sg:v2' and 'sg_v2' map to the same tables; only the first data type cleans them."""
    store = InMemoryCacheStore({"res_sg": [("1", "agentA"), ("2", "gone")]})
    metrics = RecordingMetrics()
    names = FakeTableNames({"sg:v2": "sg", "sg_v2": "sg"})
    registry = registry_of(caching_agent("agentA", "sg:v2", "sg_v2"))

    result = await _agent(store, registry, metrics, names=names).run()

    assert store.scans == ["rel_sg", "res_sg"]
    assert len(store.deletes) == 1
    assert [t.data_type for t in result.tables] == ["sg:v2", "sg:v2"]
    assert [dt for dt, _, _ in metrics.deleted] == ["sg:v2", "sg:v2"]
    # Duration is still recorded for the data type whose tables were skipped.
    assert sorted(dt for dt, _ in metrics.durations) == ["sg:v2", "sg_v2"]


async def test_touched_tables_reset_between_runs() -> None:
    store = InMemoryCacheStore({"res_images": [("1", "agentA")]})
    agent = _agent(store, registry_of(caching_agent("agentA", "images")))
    await agent.run()
    await agent.run()
    assert store.scans == ["rel_images", "res_images", "rel_images", "res_images"]


async def test_informative_data_type_is_not_swept() -> None:
    store = InMemoryCacheStore({"res_applications": [("1", "gone")]})
    registry = registry_of(caching_agent("agentA", informative=["applications"]))
    result = await _agent(store, registry).run()
    assert store.scans == []
    assert result.data_type_count == 0
    assert store.remaining("res_applications") == {"1": "gone"}


async def test_data_types_processed_in_sorted_order() -> None:
    store = InMemoryCacheStore()
    registry = registry_of(caching_agent("agentA", "serverGroups", "clusters", "images"))
    await _agent(store, registry).run()
    assert store.scans[1::2] == ["res_clusters", "res_images", "res_serverGroups"]


class TestFailureIsolation:
    """A store failure on one data type does not stop the others."""

    @pytest.fixture
    def store(self) -> InMemoryCacheStore:
        return InMemoryCacheStore(
            {
                "res_alpha": [("a1", "gone")],
                "res_beta": [("b1", "gone")],
                "res_gamma": [("g1", "gone")],
            }
        )

    @pytest.fixture
    def registry(self):
        return registry_of(caching_agent("agentA", "alpha", "beta", "gamma"))

    async def test_scan_failure(self, store, registry) -> None:
        store.fail_scan = {"res_beta"}
        metrics = RecordingMetrics()

        result = await _agent(store, registry, metrics).run()

        assert result.failures == 1
        assert result.failed_data_types == ["beta"]
        assert store.remaining("res_alpha") == {}
        assert store.remaining("res_gamma") == {}
        assert store.remaining("res_beta") == {"b1": "gone"}
        assert sorted(dt for dt, _ in metrics.durations) == ["alpha", "beta", "gamma"]
        assert metrics.deleted_for("beta", TableKind.RESOURCE) == []

    async def test_delete_failure(self, store, registry) -> None:
        store.fail_delete = {"res_alpha"}
        result = await _agent(store, registry).run()
        assert result.failed_data_types == ["alpha"]
        assert result.total_deleted == 2

    async def test_batches_deleted_before_failure_are_counted(self) -> None:
        class SecondBatchFails(InMemoryCacheStore):
            async def delete_ids(self, table_name, id_column, ids):
                if len(self.deletes) == 1:
                    self.deletes.append((table_name, id_column, tuple(ids)))
                    raise CacheStoreException(table_name, "delete", "deadlock detected")
                return await super().delete_ids(table_name, id_column, ids)

        store = SecondBatchFails({"res_images": [(f"r{i:03d}", "gone") for i in range(250)]})
        metrics = RecordingMetrics()

        result = await _agent(store, registry_of(caching_agent("agentA", "images")), metrics).run()

        assert result.failed_data_types == ["images"]
        assert len(store.remaining("res_images")) == 150
        assert metrics.deleted_for("images", TableKind.RESOURCE) == [100]

    async def test_failed_table_is_retried_on_next_run(self, store, registry) -> None:
        agent = _agent(store, registry)
        store.fail_scan = {"res_beta"}
        await agent.run()
        store.fail_scan = set()

        result = await agent.run()

        assert result.failures == 0
        assert store.remaining("res_beta") == {}


async def test_registry_failure_aborts_run() -> None:
    class BrokenRegistry:
        @property
        def providers(self):
            raise RegistryException("agents.json", "No such file or directory")

    store = InMemoryCacheStore()
    with pytest.raises(RegistryException):
        await _agent(store, BrokenRegistry()).run()
    assert store.scans == []


async def test_unexpected_store_error_propagates() -> None:
    class ExplodingStore(InMemoryCacheStore):
        async def delete_ids(self, table_name, id_column, ids):
            raise RuntimeError("driver bug")

    store = ExplodingStore({"res_images": [("1", "gone")]})
    with pytest.raises(RuntimeError, match="driver bug"):
        await _agent(store, registry_of(caching_agent("agentA", "images", "zeta"))).run()
    assert "res_zeta" not in store.scans


class TestRunLock:
    async def test_skips_when_lock_held_elsewhere(self) -> None:
        store = InMemoryCacheStore({"res_images": [("1", "gone")]})
        lock = FakeRunLock(available=False)

        result = await _agent(store, registry_of(caching_agent("agentA", "images")), run_lock=lock).run()

        assert result.skipped is True
        assert result.tables == []
        assert store.scans == []
        assert lock.entered == 1

    async def test_runs_when_lock_acquired(self) -> None:
        store = InMemoryCacheStore({"res_images": [("1", "gone")]})
        lock = FakeRunLock(available=True)

        result = await _agent(store, registry_of(caching_agent("agentA", "images")), run_lock=lock).run()

        assert result.skipped is False
        assert result.total_deleted == 1
