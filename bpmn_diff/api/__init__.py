"""
REST API for bpmn-diff.
"""
