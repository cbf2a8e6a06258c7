"""Tests for the HealthTracker."""
import threading


class TestRecordSearch:
    def test_hit_increments(self, health):
        health.record_search("search_context", True)
        s = health.status
        assert s["searches_total"] == 1
        assert s["searches_hits"] == 1
        assert s["searches_misses"] == 0
        assert s["searches_by_tool"]["search_context"] == 1

    def test_miss_increments(self, health):
        health.record_search("search_context", False)
        s = health.status
        assert s["searches_hits"] == 0
        assert s["searches_misses"] == 1

    def test_unknown_tool_not_tracked_per_tool(self, health):
        health.record_search("search_jira", True)
        s = health.status
        assert s["searches_total"] == 1
        assert "search_jira" not in s["searches_by_tool"]

    def test_last_search_at_set(self, health):
        assert health.status["last_search_at"] is None
        health.record_search("web_search", True)
        assert health.status["last_search_at"] is not None

    def test_status_is_a_copy(self, health):
        health.status["searches_by_tool"]["search_context"] = 99
        assert health.status["searches_by_tool"]["search_context"] == 0


class TestRecordIndex:
    def test_success(self, health):
        health.record_index(ok=True, collection="payments", chunks=42, files=5)
        s = health.status
        assert s["last_index_ok"] is True
        assert s["last_index_collection"] == "payments"
        assert s["last_index_chunks"] == 42
        assert s["last_index_files"] == 5
        assert s["last_index_at"] is not None

    def test_failure(self, health):
        health.record_index(ok=False, error="disk full")
        s = health.status
        assert s["last_index_ok"] is False
        assert s["last_index_error"] == "disk full"


class TestRecordClear:
    def test_stores_collection(self, health):
        health.record_clear("payments")
        s = health.status
        assert s["last_clear_collection"] == "payments"
        assert s["last_clear_at"] is not None


class TestIsHealthy:
    def test_healthy_before_any_index(self, health):
        assert health.is_healthy is True

    def test_healthy_after_good_index(self, health):
        health.record_index(ok=True, chunks=10)
        assert health.is_healthy is True

    def test_unhealthy_after_bad_index(self, health):
        health.record_index(ok=True, chunks=10)
        health.record_index(ok=False, error="fail")
        assert health.is_healthy is False


class TestThreadSafety:
    def test_concurrent_search_recording(self, health):
        """Verify no data corruption under concurrent writes."""
        def record_many():
            for _ in range(100):
                health.record_search("search_context", True)

        threads = [threading.Thread(target=record_many) for _ in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert health.status["searches_total"] == 1000
        assert health.status["searches_hits"] == 1000
