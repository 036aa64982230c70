"""
Post-operative risk engine core.

Pure, synchronous components:
    scoring     – factor catalog, temporal adjustment, score aggregation
    guidance    – care recommendations and explanations
    projection  – forward risk trajectory
    intake      – adapters for externally produced values
    reports     – JSON export
"""
