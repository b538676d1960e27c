"""
Test suite for the configuration-state controller.

Focus areas:
- Transition predicates
- Dependency list algebra and version ordering
- Pattern resolution and auto-provisioning classification
- End-to-end configstate requests against in-memory collaborators
"""
