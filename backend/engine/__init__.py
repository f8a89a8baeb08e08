"""
Cluster query engines.

`ClusterIndex` builds the zoom pyramid for one point set and answers cluster,
children, leaves and tile queries against it. `in_memory` caches one index per
configured scenario for the HTTP layer.
"""
