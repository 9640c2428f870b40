"""Mount services: control plane, mount helper, parameters, orchestration, launcher glue."""
