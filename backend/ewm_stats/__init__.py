"""
Hit-tracking service: records page views and answers aggregated hit counts.
"""
