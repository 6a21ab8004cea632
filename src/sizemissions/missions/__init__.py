"""Mission progression: catalog, state machine, rewards and event ingestion."""
