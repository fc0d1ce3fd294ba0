"""Service orchestration layer: coordinates multi-service workflows.

Modules:
- relay_pipeline: verifies, renders and delivers one inbound email.
"""
