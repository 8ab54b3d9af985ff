"""API Hub — attribute registry client and API registration.

- Models — attribute definitions, allowed values, outcomes
- Client — idempotent read/create/patch over the REST API
- Registration — ensure an API and version exist before tagging them
"""
