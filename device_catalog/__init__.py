"""
Device catalog service: marketing-name lookups backed by the Google Play
supported-devices dataset.
"""
