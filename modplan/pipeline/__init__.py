"""Layout pipeline stages: arrangement → grid → allocator."""
