"""
Services around the tag engine: settings, file loading and reports.
"""
