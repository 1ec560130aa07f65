"""Tests for worker pool sizing"""
from unittest.mock import patch

from worktree_keeper.utils.threading import MAX_API_WORKERS, get_optimal_worker_count


class TestWorkerCount:
    def test_user_value_wins(self):
        assert get_optimal_worker_count(3) == 3

    def test_never_more_than_tasks(self):
        assert get_optimal_worker_count(8, tasks=2) == 2

    def test_at_least_one(self):
        assert get_optimal_worker_count(tasks=0) == 1

    def test_auto_is_capped(self):
        with patch("worktree_keeper.utils.threading.os.cpu_count", return_value=64):
            assert get_optimal_worker_count() == MAX_API_WORKERS
