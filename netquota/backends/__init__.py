# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

from .yaml_network import NetworkDocument, SiteEntry, YamlNetwork

__all__ = ["NetworkDocument", "SiteEntry", "YamlNetwork"]
