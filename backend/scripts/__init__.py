"""
Operational scripts run against the configured MongoDB.

    python -m scripts.seed_data    # service catalog and sample holders
"""
