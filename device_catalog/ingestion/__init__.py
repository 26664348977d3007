"""
Device dataset ingestion package.

Responsibilities:
- Download the Google Play supported-devices CSV.
- Decode it (UTF-8 or UTF-16 with BOM) and drop the license banner.
- Parse and normalize rows into device records.
- Upsert the records into the device store in one transaction.
"""
