"""
Unit tests for the restore client.
"""

from unittest.mock import Mock

from ccachekit.caching.keys import CacheKeys
from ccachekit.caching.restore import restore_cache


class TestRestoreCache:
    """Test restore_cache()."""

    def test_hit(self, state_manager, github_files, tmp_path, caplog):
        """Test a hit is recorded and exported."""
        _, output_file = github_files
        store = Mock()
        store.restore.return_value = "ccache-k-2024"
        keys = CacheKeys("ccache-k-", ["ccache-"])

        with caplog.at_level("INFO"):
            result = restore_cache(store, [tmp_path / ".ccache"], keys, state_manager)

        assert result == "ccache-k-2024"
        store.restore.assert_called_once_with(
            [tmp_path / ".ccache"], "ccache-k-", ["ccache-"]
        )
        state = state_manager.load()
        assert state.cache_hit is True
        assert state.restored_key == "ccache-k-2024"
        assert "cache-hit=true" in output_file.read_text()
        assert 'Restored from cache key "ccache-k-2024".' in caplog.text

    def test_miss(self, state_manager, tmp_path, caplog):
        """Test a miss is recorded."""
        store = Mock()
        store.restore.return_value = None

        with caplog.at_level("INFO"):
            result = restore_cache(store, [tmp_path], CacheKeys("ccache-"), state_manager)

        assert result is None
        assert state_manager.load().cache_hit is False
        assert "No cache found." in caplog.text

    def test_disabled(self, state_manager, tmp_path, caplog):
        """Test restore=false skips the store and leaves cache_hit unset."""
        store = Mock()

        with caplog.at_level("INFO"):
            restore_cache(store, [tmp_path], CacheKeys("ccache-"), state_manager, enabled=False)

        store.restore.assert_not_called()
        assert state_manager.load().cache_hit is None
        assert "Restore set to false, skip restoring cache." in caplog.text
