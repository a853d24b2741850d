"""Domain layer: entities, query descriptors, errors and store contracts."""
