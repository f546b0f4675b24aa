# backend/tests/unit/test_base_service.py
import logging
from unittest.mock import Mock, patch

import pytest
from sqlalchemy.exc import OperationalError

from roombook.core.exceptions import NotFoundException, UnavailableException
from roombook.services.base import BaseService


class _SampleService(BaseService):
    @BaseService.measure_operation("succeed")
    def succeed(self, value):
        return value * 2

    @BaseService.measure_operation("fail")
    def fail(self):
        raise NotFoundException("nope")


class TestMeasureOperation:
    def test_returns_result_and_reports_success(self):
        service = _SampleService(Mock())
        with patch("roombook.services.base.prometheus_metrics") as metrics:
            assert service.succeed(21) == 42
        kwargs = metrics.record_service_operation.call_args.kwargs
        assert kwargs["operation"] == "succeed"
        assert kwargs["status"] == "success"
        assert kwargs["error_type"] is None

    def test_reports_to_prometheus(self):
        service = _SampleService(Mock())
        with patch("roombook.services.base.prometheus_metrics") as metrics:
            with pytest.raises(NotFoundException):
                service.fail()
        kwargs = metrics.record_service_operation.call_args.kwargs
        assert kwargs["service"] == "_SampleService"
        assert kwargs["status"] == "error"
        assert kwargs["error_type"] == "NotFoundException"

    def test_slow_operation_warning(self, caplog):
        service = _SampleService(Mock())
        with patch("roombook.services.base.time.perf_counter", side_effect=[0.0, 2.5]):
            with caplog.at_level(logging.WARNING):
                service.succeed(1)
        assert "Slow operation detected: succeed" in caplog.text


class TestTransaction:
    def test_commits_on_success(self):
        db = Mock()
        with _SampleService(db).transaction():
            pass
        db.commit.assert_called_once()
        db.rollback.assert_not_called()

    def test_store_error_becomes_unavailable(self):
        db = Mock()
        with pytest.raises(UnavailableException):
            with _SampleService(db).transaction():
                raise OperationalError("SELECT 1", {}, Exception("gone"))
        db.rollback.assert_called_once()

    def test_domain_error_propagates_after_rollback(self):
        db = Mock()
        with pytest.raises(NotFoundException):
            with _SampleService(db).transaction():
                raise NotFoundException("missing")
        db.rollback.assert_called_once()
        db.commit.assert_not_called()
