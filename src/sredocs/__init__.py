"""Extract structured records from charter and postmortem documents."""
