"""Click commands for synctivity."""
