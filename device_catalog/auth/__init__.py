"""
Operator authentication for the ingestion trigger.
"""
