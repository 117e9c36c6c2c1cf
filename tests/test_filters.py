# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

import types

import pytest
from pydantic import ValidationError as PydanticValidationError

from netquota.core.filters import UsageFilter, accepts, filter_usage
from netquota.core.models import TenantQuotaRecord, ThresholdFilter


def record(blog_id, used, percent, quota=1000):
    return TenantQuotaRecord(
        blog_id=blog_id,
        url=f"http://example.com/site{blog_id}/",
        quota=quota,
        quota_used=used,
        quota_used_percent=percent,
    )


RECORDS = [
    record(1, 10.0, 1.0),
    record(2, 500.0, 50.0),
    record(3, 99.99, 9.99),
    record(4, 100.0, 10.0),
    record(5, 1000.0, 100.0),
]


def test_no_thresholds_pass_through():
    """Test an empty filter keeps every record in order"""
    result = list(filter_usage(RECORDS, ThresholdFilter()))
    assert result == RECORDS


def test_min_used_mb_boundary():
    cfg = ThresholdFilter(min_used_mb=100)
    assert not accepts(record(1, 99.99, 9.99), cfg)
    assert accepts(record(1, 100, 10.0), cfg)


def test_min_used_mb():
    result = filter_usage(RECORDS, ThresholdFilter(min_used_mb=100))
    assert [r.blog_id for r in result] == [2, 4, 5]


def test_min_used_percent():
    result = filter_usage(RECORDS, ThresholdFilter(min_used_percent=50))
    assert [r.blog_id for r in result] == [2, 5]


def test_thresholds_are_a_union():
    """Test clearing either threshold is enough"""
    cfg = ThresholdFilter(min_used_mb=1000000, min_used_percent=50)
    assert accepts(record(1, 500.0, 50.0), cfg)

    cfg = ThresholdFilter(min_used_mb=100, min_used_percent=50)
    result = filter_usage(RECORDS, cfg)
    assert [r.blog_id for r in result] == [2, 4, 5]


def test_rejects_when_no_threshold_cleared():
    cfg = ThresholdFilter(min_used_mb=2000, min_used_percent=99)
    assert not accepts(record(1, 1000.0, 50.0), cfg)


def test_filter_is_lazy():
    """Test records are pulled one at a time"""
    pulled = []

    def source():
        for r in RECORDS:
            pulled.append(r.blog_id)
            yield r

    result = filter_usage(source(), ThresholdFilter(min_used_mb=500))
    assert isinstance(result, types.GeneratorType)
    assert pulled == []

    assert next(result).blog_id == 2
    assert pulled == [1, 2]

    assert [r.blog_id for r in result] == [5]
    assert pulled == [1, 2, 3, 4, 5]


def test_filter_is_single_pass():
    result = filter_usage(iter(RECORDS), ThresholdFilter())
    assert len(list(result)) == 5
    assert list(result) == []


def test_usage_filter_stage():
    stage = UsageFilter(ThresholdFilter(min_used_percent=100))
    assert [r.blog_id for r in stage(RECORDS)] == [5]
    assert [r.blog_id for r in UsageFilter().filter(RECORDS)] == [1, 2, 3, 4, 5]


@pytest.mark.parametrize(
    "kwargs", [{"min_used_mb": -1}, {"min_used_percent": -0.5}, {"min_used_percent": 101}]
)
def test_threshold_bounds(kwargs):
    with pytest.raises(PydanticValidationError):
        ThresholdFilter(**kwargs)
