# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

import copy

import pytest
import yaml

NETWORK = {
    "multisite": True,
    "current_site": 1,
    "default_quota_mb": 100,
    "sites": [
        {"blog_id": 1, "siteurl": "http://example.com", "used_mb": 12.5},
        {"blog_id": 2, "siteurl": "http://example.com/shop", "used_mb": 940, "quota_mb": 1024},
        {"blog_id": 3, "siteurl": "http://example.com/blog/", "used_mb": 9850, "quota_mb": 10000},
        {"blog_id": 4, "siteurl": "http://example.com/full", "used_mb": 150},
    ],
}


@pytest.fixture
def network_data():
    return copy.deepcopy(NETWORK)


@pytest.fixture
def network_file(tmp_path, network_data):
    path = tmp_path / "network.yaml"
    path.write_text(yaml.safe_dump(network_data, sort_keys=False), encoding="utf-8")
    return path
